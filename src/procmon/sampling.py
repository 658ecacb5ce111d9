"""Delta-based CPU utilization and top-N ranking."""

from collections.abc import Iterable

from procmon.models import RankedEntry


class SampleStore:
    """
    Per-pid baseline of the last observed cumulative CPU time.

    An unseen pid has a baseline of 0, so the first tick a process is seen
    reports its whole lifetime CPU time as if it was spent in that interval.
    Long-lived processes can therefore show a one-tick spike when they first
    appear in the table.
    """

    def __init__(self) -> None:
        self._baselines: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._baselines)

    def __contains__(self, pid: object) -> bool:
        return pid in self._baselines

    def get(self, pid: int) -> int:
        """Get the last observed CPU time for pid, or 0 if it has not been seen."""
        return self._baselines.get(pid, 0)

    def set(self, pid: int, value: int) -> None:
        """Record value as the baseline for pid."""
        self._baselines[pid] = value

    def retain(self, live_pids: Iterable[int]) -> int:
        """
        Drop baselines for pids that are not in live_pids.

        Returns:
            The number of baselines removed.
        """
        live = set(live_pids)
        stale = [pid for pid in self._baselines if pid not in live]
        for pid in stale:
            del self._baselines[pid]
        return len(stale)


def compute_percent(delta: int, system_delta: int) -> float:
    """Share of system_delta taken by delta, rounded to 2 places and clamped to [0, 100]."""
    if system_delta <= 0:
        return 0.0
    percent = round(delta * 100 / system_delta, 2)
    return max(0.0, min(100.0, percent))


class UsageCalculator:
    """Turns cumulative counters into utilization, updating the store as it goes."""

    def __init__(self, store: SampleStore) -> None:
        self._store = store

    def percent(self, pid: int, current_total: int, system_delta: int) -> float:
        """Utilization of pid since its baseline, then move the baseline to current_total."""
        # A counter that went backwards (pid reuse, reset) counts as no usage
        delta = max(0, current_total - self._store.get(pid))
        result = compute_percent(delta, system_delta)
        self._store.set(pid, current_total)
        return result


def select_top(entries: Iterable[RankedEntry], n: int) -> list[RankedEntry]:
    """Return the n busiest entries, highest cpu_percent first, ties by ascending pid."""
    if n <= 0:
        return []
    return sorted(entries, key=lambda e: (-e.cpu_percent, e.pid))[:n]
