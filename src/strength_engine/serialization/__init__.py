"""Serialization module — JSON-compatible views of engine values and history documents."""

from strength_engine.serialization.export import (
    cycle_to_dict,
    prescription_to_dict,
    progress_to_dict,
    recommendation_to_dict,
    to_json_string,
    trace_to_dict,
)
from strength_engine.serialization.history import dump_store, load_store, read_document, write_document

__all__ = [
    "cycle_to_dict",
    "dump_store",
    "load_store",
    "prescription_to_dict",
    "progress_to_dict",
    "read_document",
    "recommendation_to_dict",
    "to_json_string",
    "trace_to_dict",
    "write_document",
]
