"""Shared fixtures: a fake /proc tree under tmp_path."""

import shutil
from pathlib import Path

import pytest


class FakeProc:
    """Minimal writable stand-in for /proc."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.set_cpu(0)

    @staticmethod
    def stat_line(pid: int, name: str, utime: int, stime: int) -> str:
        """Build a /proc/<pid>/stat record with utime and stime in fields 14 and 15."""
        return (
            f"{pid} ({name}) S 1 {pid} {pid} 0 -1 4194560 1523 0 12 0 "
            f"{utime} {stime} 0 0 20 0 1 0 8123 11231232 2254 18446744073709551615\n"
        )

    def set_cpu(self, total: int, *, idle: int = 0) -> None:
        """Write an aggregate cpu line whose eight counters sum to total + idle."""
        (self.root / "stat").write_text(
            f"cpu  {total} 0 0 {idle} 0 0 0 0 0 0\n"
            f"cpu0 {total} 0 0 {idle} 0 0 0 0 0 0\n"
            "intr 0\n"
        )

    def add(self, pid: int, name: str, utime: int, stime: int = 0) -> None:
        path = self.root / str(pid)
        path.mkdir(exist_ok=True)
        (path / "stat").write_text(self.stat_line(pid, name, utime, stime))

    def write_raw(self, pid: int, text: str) -> None:
        path = self.root / str(pid)
        path.mkdir(exist_ok=True)
        (path / "stat").write_text(text)

    def remove(self, pid: int) -> None:
        shutil.rmtree(self.root / str(pid))


@pytest.fixture
def fake_proc(tmp_path: Path) -> FakeProc:
    root = tmp_path / "proc"
    root.mkdir()
    return FakeProc(root)


@pytest.fixture
def stat_line():
    """Builder for well-formed /proc/<pid>/stat records."""
    return FakeProc.stat_line
