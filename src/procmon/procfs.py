"""Readers for the Linux /proc CPU-time counters."""

import os
from pathlib import Path

import structlog

from procmon.models import ProcessSample

log = structlog.get_logger()

# user, nice, system, idle, iowait, irq, softirq, steal
CPU_COUNTER_FIELDS = 8

# Indexes into the fields following the ")" that closes the command name.
# Index 0 is global field 3 (state), so utime (14) and stime (15) are 11 and 12.
UTIME_INDEX = 11
STIME_INDEX = 12


class MalformedRecord(ValueError):
    """A counter record did not have the expected layout."""


def _counter(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise MalformedRecord(f"not an integer counter: {value!r}") from None
    if number < 0:
        raise MalformedRecord(f"negative counter: {number}")
    return number


def parse_stat_line(line: str) -> tuple[int, str, int]:
    """
    Parse one /proc/<pid>/stat record.

    The command name sits between the first "(" and the last ")" and may itself
    contain spaces or parentheses, so it is cut out by delimiter before the
    remaining fields are split and addressed by position.

    Returns:
        (pid, name, utime + stime)

    Raises:
        MalformedRecord: If the delimiters or the counter fields are missing.
    """
    start = line.find("(")
    end = line.rfind(")")
    if start < 0 or end < start:
        raise MalformedRecord("command name delimiters not found")

    try:
        pid = int(line[:start].strip())
    except ValueError:
        raise MalformedRecord(f"bad pid field: {line[:start]!r}") from None

    name = line[start + 1 : end]
    fields = line[end + 1 :].split()
    if len(fields) <= STIME_INDEX:
        raise MalformedRecord(f"expected at least {STIME_INDEX + 1} fields after name, got {len(fields)}")

    return pid, name, _counter(fields[UTIME_INDEX]) + _counter(fields[STIME_INDEX])


def parse_cpu_line(line: str) -> int:
    """Sum the eight aggregate counters on the "cpu" line of /proc/stat."""
    fields = line.split()
    if not fields or fields[0] != "cpu":
        raise MalformedRecord(f"expected aggregate cpu line, got {line[:20]!r}")
    counters = fields[1 : 1 + CPU_COUNTER_FIELDS]
    if len(counters) < CPU_COUNTER_FIELDS:
        raise MalformedRecord(f"expected {CPU_COUNTER_FIELDS} cpu counters, got {len(counters)}")
    return sum(_counter(value) for value in counters)


def read_system_counter(proc_root: Path = Path("/proc")) -> int:
    """
    Read the system-wide CPU-time total from <proc_root>/stat.

    Raises:
        OSError: If the file cannot be read.
        MalformedRecord: If the first line is not an aggregate cpu line.
    """
    with open(proc_root / "stat", encoding="ascii") as fh:
        return parse_cpu_line(fh.readline())


class ProcessScanner:
    """
    Enumerates live processes and reads their cumulative CPU time.

    Processes exit between enumeration and reading all the time; those, and any
    record that does not parse, are left out of the scan rather than failing it.
    """

    def __init__(self, proc_root: Path = Path("/proc")) -> None:
        """Initialize the ProcessScanner reading from proc_root."""
        self._proc_root = Path(proc_root)

    @property
    def proc_root(self) -> Path:
        """Get the directory processes are enumerated from."""
        return self._proc_root

    def pids(self) -> list[int]:
        """List the pids that currently have an entry under the proc root."""
        try:
            with os.scandir(self._proc_root) as entries:
                return [int(entry.name) for entry in entries if entry.name.isdigit()]
        except OSError as exc:
            log.warning("process_list_unavailable", root=str(self._proc_root), error=str(exc))
            return []

    def scan(self) -> list[ProcessSample]:
        """
        Read the cumulative CPU time of every live process.

        Returns:
            One ProcessSample per pid whose stat record could be read and parsed.
        """
        samples: list[ProcessSample] = []

        for pid in self.pids():
            path = self._proc_root / str(pid) / "stat"
            try:
                line = path.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                log.debug("process_skipped", pid=pid, reason="unreadable", error=str(exc))
                continue

            try:
                _, name, cpu_time_total = parse_stat_line(line)
            except MalformedRecord as exc:
                log.debug("process_skipped", pid=pid, reason="malformed", error=str(exc))
                continue

            samples.append(ProcessSample(pid=pid, name=name, cpu_time_total=cpu_time_total))

        return samples
