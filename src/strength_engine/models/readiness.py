"""Readiness models — per-channel readings and the fused daily snapshot."""

from __future__ import annotations

from dataclasses import dataclass

from strength_engine.models.enums import CAP_LEVELS, Channel, ReadinessClass


@dataclass(frozen=True)
class Baseline:
    """Robust baseline over a trailing window of one channel's samples.

    Derived on every request; never stored as a source of truth.
    """

    center: float
    scale: float  # MAD-derived sigma, never exactly zero
    sample_count: int


@dataclass(frozen=True)
class ChannelReading:
    """Classification of one active readiness channel.

    z-score channels carry ``z_score`` and ``baseline``; the effort channel
    carries ``mean_overshoot`` instead.
    """

    channel: Channel
    classification: ReadinessClass
    z_score: float | None = None
    baseline: Baseline | None = None
    mean_overshoot: float | None = None

    @property
    def is_impaired(self) -> bool:
        return self.classification is not ReadinessClass.GREEN


@dataclass(frozen=True)
class ReadinessSnapshot:
    """Fused readiness for one day.

    Inactive channels are ``None`` and are excluded from fusion. Build
    instances through :func:`strength_engine.math.readiness.fuse_readiness`
    so ``combined`` and ``cap_level`` stay consistent with the channels.
    """

    velocity: ChannelReading | None = None
    recovery: ChannelReading | None = None
    effort: ChannelReading | None = None
    combined: ReadinessClass = ReadinessClass.GREEN
    veto_applied: bool = False

    @property
    def cap_level(self) -> int:
        return CAP_LEVELS[self.combined]

    @property
    def channels(self) -> tuple[ChannelReading | None, ...]:
        return (self.velocity, self.recovery, self.effort)

    @property
    def active_channels(self) -> tuple[ChannelReading, ...]:
        return tuple(c for c in self.channels if c is not None)

    @property
    def all_channels_impaired(self) -> bool:
        """True only when all three channels are active and YELLOW or RED."""
        return all(c is not None and c.is_impaired for c in self.channels)
