"""Data models for memmon."""

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class MemorySnapshot:
    """Immutable snapshot of system-wide memory counters."""

    total: int  # Bytes
    used: int
    free: int
    available: int


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Name and resident memory of a single process."""

    name: str
    memory: int  # RSS, bytes


@dataclass(slots=True, frozen=True)
class AppUsage:
    """Memory accumulated under one normalized application name."""

    name: str
    memory: int  # Bytes
