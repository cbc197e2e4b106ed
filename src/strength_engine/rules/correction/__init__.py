"""Correction stages: effort-distance trend and return from break."""
