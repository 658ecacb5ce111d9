"""Configuration for procmon."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class MonitorConfig:
    """Sampling configuration.

    There is no config file; the defaults below are what the dashboard runs with.
    """

    interval: int = 1  # Seconds between ticks
    min_interval: int = 1
    max_interval: int = 10
    top_n: int = 5  # Rows shown in the process table
    proc_root: Path = field(default_factory=lambda: Path("/proc"))

    def __post_init__(self) -> None:
        """Validate the bounds and normalize proc_root to a Path."""
        if self.min_interval < 1:
            raise ValueError(f"min_interval must be at least 1, got {self.min_interval}")
        if self.min_interval > self.max_interval:
            raise ValueError(
                f"min_interval ({self.min_interval}) exceeds max_interval ({self.max_interval})"
            )
        if self.top_n < 0:
            raise ValueError(f"top_n must be non-negative, got {self.top_n}")
        self.proc_root = Path(self.proc_root)

    def clamp_interval(self, value: int) -> int:
        """Return value bounded to [min_interval, max_interval]."""
        return max(self.min_interval, min(self.max_interval, value))
