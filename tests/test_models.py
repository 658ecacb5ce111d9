"""Tests for procmon data models."""

import dataclasses

import pytest

from procmon.models import ProcessSample, RankedEntry, TickResult


def test_process_sample_creation():
    """Test ProcessSample dataclass creation."""
    sample = ProcessSample(pid=123, name="test process", cpu_time_total=4200)

    assert sample.pid == 123
    assert sample.name == "test process"
    assert sample.cpu_time_total == 4200


def test_ranked_entry_is_frozen():
    """Test that RankedEntry is immutable (frozen)."""
    entry = RankedEntry(pid=1, name="init", cpu_percent=0.5)

    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.cpu_percent = 99.0


def test_models_use_slots():
    """Slots-based dataclasses don't have __dict__."""
    assert not hasattr(ProcessSample(pid=1, name="init", cpu_time_total=0), "__dict__")
    assert not hasattr(RankedEntry(pid=1, name="init", cpu_percent=0.0), "__dict__")
    assert not hasattr(TickResult(entries=(), process_count=0), "__dict__")


def test_tick_result_defaults():
    """An active result with no system delta unless told otherwise."""
    result = TickResult(entries=(), process_count=3)

    assert result.paused is False
    assert result.system_delta == 0
