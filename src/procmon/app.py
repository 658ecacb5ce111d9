"""procmon - Main Textual application."""

from collections.abc import Callable
from datetime import datetime
from functools import partial

from textual.app import App, ComposeResult
from textual.containers import Container
from textual.timer import Timer
from textual.widgets import DataTable, Footer, Static

from procmon.host import HostSnapshot, collect_host_snapshot, format_uptime
from procmon.logging import configure
from procmon.models import RankedEntry, TickResult
from procmon.monitor import Control, ProcessMonitor

UNAVAILABLE = "unavailable"


def format_host(snapshot: HostSnapshot) -> str:
    """Format the host snapshot as the header text."""
    uptime = format_uptime(snapshot.uptime_seconds) if snapshot.uptime_seconds is not None else UNAVAILABLE
    if snapshot.load_avg is not None:
        l1, l5, l15 = snapshot.load_avg
        load = f"{l1:.2f} {l5:.2f} {l15:.2f}"
    else:
        load = UNAVAILABLE
    memory = f"{snapshot.memory_percent:.2f}%" if snapshot.memory_percent is not None else UNAVAILABLE
    cores = str(snapshot.cpu_cores) if snapshot.cpu_cores is not None else UNAVAILABLE
    return (
        f"Uptime: {uptime}\n"
        f"Load Average (1,5,15 min): {load}\n"
        f"Memory Usage: {memory}\n"
        f"CPU: {snapshot.cpu_model or UNAVAILABLE}\n"
        f"Cores: {cores}"
    )


class HeaderStats(Static):
    """Header widget showing clock, uptime, load, memory and CPU details."""

    DEFAULT_CSS = """
    HeaderStats {
        height: auto;
        min-height: 6;
        padding: 0 1;
        background: $surface;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize HeaderStats."""
        super().__init__(*args, **kwargs)
        self._text = "Loading host info..."

    @property
    def text(self) -> str:
        """Get the text currently shown."""
        return self._text

    def update_stats(self, snapshot: HostSnapshot, now: datetime | None = None) -> None:
        """Redraw from a host snapshot."""
        now = now or datetime.now()
        self._text = (
            f"procmon  (q quit, p pause/resume, +/- speed)  {now:%a %b %d %H:%M:%S %Y}\n"
            f"{format_host(snapshot)}"
        )
        self.update(self._text)


class TopProcesses(Container):
    """The top-N process table."""

    DEFAULT_CSS = """
    TopProcesses {
        height: auto;
        border: solid $primary;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize TopProcesses."""
        super().__init__(*args, **kwargs)
        self._pids: list[int] = []

    @property
    def pids(self) -> list[int]:
        """Pids currently shown, in display order."""
        return list(self._pids)

    def compose(self) -> ComposeResult:
        """Compose the process table."""
        yield DataTable(id="process-table")

    def on_mount(self) -> None:
        """Set up the table columns when mounted."""
        table = self.query_one("#process-table", DataTable)
        table.cursor_type = "none"
        table.add_column("PID", key="pid", width=8)
        table.add_column("CPU%", key="cpu", width=8)
        table.add_column("Name", key="name")

    def update_entries(self, entries: tuple[RankedEntry, ...]) -> None:
        """
        Replace the table contents.

        The table only ever holds top_n rows, so it is rebuilt each tick rather
        than patched cell by cell.
        """
        table = self.query_one("#process-table", DataTable)
        table.clear()
        for entry in entries:
            table.add_row(str(entry.pid), f"{entry.cpu_percent:.2f}", entry.name, key=str(entry.pid))
        self._pids = [entry.pid for entry in entries]


class StatusLine(Static):
    """Bottom line: paused indicator, or process count and refresh interval."""

    def __init__(self, *args, **kwargs) -> None:
        """Initialize StatusLine."""
        super().__init__(*args, **kwargs)
        self._text = ""

    @property
    def text(self) -> str:
        """Get the text currently shown."""
        return self._text

    def show(self, result: TickResult | None, interval: int, paused: bool) -> None:
        """Show the paused indicator, or the process count and interval."""
        if paused:
            self._text = "Paused"
        elif result is not None:
            self._text = f"Processes: {result.process_count}  Refresh: {interval}s"
        else:
            self._text = f"Refresh: {interval}s"
        self.update(self._text)


class ProcmonApp(App):
    """Main procmon application."""

    TITLE = "procmon"
    SUB_TITLE = "Smart Process Monitor"

    CSS = """
    Screen {
        layout: vertical;
    }

    #status-line {
        dock: bottom;
        height: 1;
        margin-bottom: 1;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("p", "toggle_pause", "Pause/Resume"),
        ("plus", "faster", "Faster"),
        ("minus", "slower", "Slower"),
    ]

    def __init__(
        self,
        monitor: ProcessMonitor | None = None,
        host_reader: Callable[[], HostSnapshot] | None = None,
    ) -> None:
        """
        Initialize the ProcmonApp.

        Args:
            monitor: Sampling engine. Defaults to one reading /proc.
            host_reader: Source of header data. Defaults to collect_host_snapshot.
        """
        super().__init__()
        self._monitor = monitor or ProcessMonitor()
        self._host_reader = host_reader or partial(collect_host_snapshot, self._monitor.config.proc_root)
        self._timer: Timer | None = None
        self._last_result: TickResult | None = None

    @property
    def monitor(self) -> ProcessMonitor:
        """Get the sampling engine."""
        return self._monitor

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield HeaderStats(id="header-stats")
        yield TopProcesses(id="top-processes")
        yield StatusLine(id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        """Run the first tick once the widgets are up; each tick schedules the next."""
        self.call_after_refresh(self._run_tick)

    def _run_tick(self) -> None:
        """Run one tick, draw it, and schedule the next one."""
        if self._monitor.should_quit:
            return

        result = self._monitor.tick()
        if not result.paused:
            self._last_result = result
        self._update_ui(result)
        self._timer = self.set_timer(self._monitor.interval, self._run_tick)

    def _update_ui(self, result: TickResult) -> None:
        # A bad frame must never take the dashboard down
        try:
            self.query_one("#header-stats", HeaderStats).update_stats(self._host_reader())
        except Exception:
            self.log.error("header update failed")

        if not result.paused:
            try:
                self.query_one(TopProcesses).update_entries(result.entries)
            except Exception:
                self.log.error("process table update failed")

        self._update_status()

    def _update_status(self) -> None:
        try:
            self.query_one("#status-line", StatusLine).show(
                self._last_result, self._monitor.interval, self._monitor.paused
            )
        except Exception:
            self.log.error("status update failed")

    def action_toggle_pause(self) -> None:
        """Handle pause action - toggle pause and resume."""
        self._monitor.handle(Control.TOGGLE_PAUSE)
        self._update_status()

    def action_faster(self) -> None:
        """Handle faster action - shorten the refresh interval."""
        self._monitor.handle(Control.SPEED_UP)
        self._update_status()

    def action_slower(self) -> None:
        """Handle slower action - lengthen the refresh interval."""
        self._monitor.handle(Control.SLOW_DOWN)
        self._update_status()

    def action_quit(self) -> None:
        """Stop ticking and exit."""
        self._monitor.handle(Control.QUIT)
        if self._timer is not None:
            self._timer.stop()
        self.exit()


def main() -> None:
    """Entry point for procmon."""
    configure()
    app = ProcmonApp()
    app.run()


if __name__ == "__main__":
    main()
