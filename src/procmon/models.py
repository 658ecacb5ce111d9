"""Data models for procmon."""

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ProcessSample:
    """Raw CPU-time counters read for one process during a single tick."""

    pid: int
    name: str
    cpu_time_total: int  # utime + stime, in clock ticks


@dataclass(slots=True, frozen=True)
class RankedEntry:
    """A process and its CPU utilization for the last interval."""

    pid: int
    name: str
    cpu_percent: float  # 0.0 - 100.0, not normalized per core


@dataclass(slots=True)
class TickResult:
    """Everything one tick hands to the display."""

    entries: tuple[RankedEntry, ...]
    process_count: int
    paused: bool = False
    system_delta: int = 0
