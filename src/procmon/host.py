"""Host-wide figures for the dashboard header."""

import time
from dataclasses import dataclass
from pathlib import Path

import psutil
import structlog

log = structlog.get_logger()


@dataclass(slots=True)
class HostSnapshot:
    """Snapshot of host information. None means the source could not be read."""

    uptime_seconds: float | None
    load_avg: tuple[float, float, float] | None
    memory_percent: float | None
    cpu_model: str | None
    cpu_cores: int | None


def memory_usage_percent(total: int, free: int, buffers: int, cached: int) -> float | None:
    """Percent of memory in use, not counting buffers and page cache."""
    if total <= 0:
        return None
    used = total - free - buffers - cached
    return used * 100.0 / total


MEMINFO_FIELDS = ("MemTotal", "MemFree", "Buffers", "Cached")


def read_meminfo(proc_root: Path = Path("/proc")) -> dict[str, int]:
    """
    Read MemTotal, MemFree, Buffers and Cached from meminfo, in kB.

    Each field is tracked separately; Cached is the bare "Cached:" line, which
    unlike psutil's `cached` does not include SReclaimable. Missing fields are 0.
    """
    values = dict.fromkeys(MEMINFO_FIELDS, 0)
    with open(proc_root / "meminfo", encoding="ascii", errors="replace") as fh:
        for line in fh:
            label, _, rest = line.partition(":")
            if label in values:
                fields = rest.split()
                if fields and fields[0].isdigit():
                    values[label] = int(fields[0])
    return values


def format_uptime(seconds: float) -> str:
    """Format seconds as HH:MM:SS (hours keep counting past 24)."""
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def read_cpuinfo(proc_root: Path = Path("/proc")) -> tuple[str | None, int | None]:
    """
    Read the CPU model name and logical core count from cpuinfo.

    Returns:
        (first "model name" value, number of "processor" entries); the core
        count is None when no processor entries were found.
    """
    model: str | None = None
    cores = 0
    with open(proc_root / "cpuinfo", encoding="utf-8", errors="replace") as fh:
        for line in fh:
            if line.startswith("model name") and model is None:
                _, _, value = line.partition(":")
                model = value.strip()
            elif line.startswith("processor"):
                cores += 1
    return model, cores or None


def collect_host_snapshot(proc_root: Path = Path("/proc")) -> HostSnapshot:
    """Collect uptime, load average, memory usage and CPU description."""
    try:
        uptime: float | None = time.time() - psutil.boot_time()
    except (OSError, RuntimeError) as exc:
        log.warning("uptime_unavailable", error=str(exc))
        uptime = None

    try:
        load_avg: tuple[float, float, float] | None = psutil.getloadavg()
    except OSError as exc:
        log.warning("load_average_unavailable", error=str(exc))
        load_avg = None

    try:
        mem = read_meminfo(proc_root)
        memory_percent = memory_usage_percent(mem["MemTotal"], mem["MemFree"], mem["Buffers"], mem["Cached"])
    except OSError as exc:
        log.warning("memory_unavailable", error=str(exc))
        memory_percent = None

    try:
        cpu_model, cpu_cores = read_cpuinfo(proc_root)
    except OSError as exc:
        log.warning("cpuinfo_unavailable", error=str(exc))
        cpu_model, cpu_cores = None, None
    if cpu_cores is None:
        cpu_cores = psutil.cpu_count()

    return HostSnapshot(
        uptime_seconds=uptime,
        load_avg=load_avg,
        memory_percent=memory_percent,
        cpu_model=cpu_model,
        cpu_cores=cpu_cores,
    )
