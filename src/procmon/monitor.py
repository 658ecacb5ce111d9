"""Tick orchestration for procmon."""

from enum import Enum

import structlog

from procmon.config import MonitorConfig
from procmon.models import RankedEntry, TickResult
from procmon.procfs import MalformedRecord, ProcessScanner, read_system_counter
from procmon.sampling import SampleStore, UsageCalculator, select_top

log = structlog.get_logger()


class Control(Enum):
    """Control signals coming from the keyboard."""

    QUIT = "quit"
    TOGGLE_PAUSE = "pause"
    SPEED_UP = "faster"
    SLOW_DOWN = "slower"


class ProcessMonitor:
    """
    Drives one sampling cycle per tick.

    Holds the only state that survives between ticks: the per-pid baselines,
    the previous system-wide counter, the pause flag and the refresh interval.
    The caller runs tick(), draws the result, waits `interval` seconds while
    feeding key presses to handle(), and repeats until should_quit is set.
    """

    def __init__(
        self,
        config: MonitorConfig | None = None,
        scanner: ProcessScanner | None = None,
        store: SampleStore | None = None,
    ) -> None:
        """
        Initialize the ProcessMonitor.

        Args:
            config: Sampling configuration. Defaults to MonitorConfig().
            scanner: Process scanner. Defaults to one reading config.proc_root.
            store: Baseline store, mostly for tests to inspect.
        """
        self._config = config or MonitorConfig()
        self._scanner = scanner or ProcessScanner(self._config.proc_root)
        self._store = store if store is not None else SampleStore()
        self._calculator = UsageCalculator(self._store)
        self._interval = self._config.clamp_interval(self._config.interval)
        self._paused = False
        self._should_quit = False
        self._last_system_total: int | None = self._read_system_total()

    @property
    def config(self) -> MonitorConfig:
        """Get the sampling configuration."""
        return self._config

    @property
    def store(self) -> SampleStore:
        """Get the per-pid baseline store."""
        return self._store

    @property
    def interval(self) -> int:
        """Get the current refresh interval in seconds."""
        return self._interval

    @interval.setter
    def interval(self, value: int) -> None:
        """Set the refresh interval, clamped to the configured range."""
        self._interval = self._config.clamp_interval(value)

    @property
    def paused(self) -> bool:
        """Check if ticks are currently paused."""
        return self._paused

    @property
    def should_quit(self) -> bool:
        """Check if a quit has been requested."""
        return self._should_quit

    def handle(self, control: Control) -> None:
        """Apply one control signal."""
        if control is Control.QUIT:
            self._should_quit = True
        elif control is Control.TOGGLE_PAUSE:
            self._paused = not self._paused
            log.info("monitor_paused" if self._paused else "monitor_resumed")
        elif control is Control.SPEED_UP:
            self.interval = self._interval - 1
        elif control is Control.SLOW_DOWN:
            self.interval = self._interval + 1

    def tick(self) -> TickResult:
        """
        Run one cycle and return what should be displayed.

        The system counter is read and re-baselined on every cycle, paused or
        not. While paused the scanner and the per-pid baselines are left alone,
        so the first tick after resuming measures process time over the whole
        pause against one interval of system time, and reports it clamped.
        """
        system_delta = self._advance_system_total()
        if self._paused:
            return TickResult(entries=(), process_count=0, paused=True, system_delta=system_delta)

        samples = self._scanner.scan()
        entries = [
            RankedEntry(
                pid=sample.pid,
                name=sample.name,
                cpu_percent=self._calculator.percent(sample.pid, sample.cpu_time_total, system_delta),
            )
            for sample in samples
        ]

        reclaimed = self._store.retain(sample.pid for sample in samples)
        if reclaimed:
            log.debug("baselines_reclaimed", count=reclaimed, remaining=len(self._store))

        return TickResult(
            entries=tuple(select_top(entries, self._config.top_n)),
            process_count=len(samples),
            system_delta=system_delta,
        )

    def _advance_system_total(self) -> int:
        """
        Read the system counter and return its increase since the last cycle.

        The delta is 0 when either reading is missing; the next good read
        becomes the new baseline instead of being reported in absolute form.
        """
        current = self._read_system_total()
        previous = self._last_system_total
        self._last_system_total = current
        if current is None or previous is None:
            return 0
        return current - previous

    def _read_system_total(self) -> int | None:
        try:
            return read_system_counter(self._config.proc_root)
        except (OSError, MalformedRecord) as exc:
            log.warning("system_counter_unavailable", error=str(exc))
            return None
