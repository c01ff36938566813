import pytest

from schedsim.errors import InvalidInput
from schedsim.generator import MAX_PROCESS_COUNT, PRESETS, generate_workload


def test_same_seed_same_workload():
    assert generate_workload(8, preset="mixed", seed=5) == generate_workload(8, preset="mixed", seed=5)


def test_names_are_sequential():
    procs = generate_workload(4, seed=1)
    assert [p.pid for p in procs] == ["P1", "P2", "P3", "P4"]


def test_default_preset():
    procs = generate_workload(6, seed=3)
    assert [p.priority for p in procs] == [1, 2, 3, 4, 5, 6]
    assert all(p.arrival_time == 0 for p in procs)
    assert all(1 <= p.burst_time <= 10 for p in procs)


def test_priority_demo_counts_down():
    procs = generate_workload(5, preset="priority-demo", seed=3)
    assert [p.priority for p in procs] == [5, 4, 3, 2, 1]
    assert all(5 <= p.burst_time <= 14 for p in procs)


@pytest.mark.parametrize(
    "preset, burst, priority, arrival",
    [
        ("random", (1, 20), (1, 30), (0, 9)),
        ("short", (1, 5), (1, 4), (0, 0)),
        ("mixed", (1, 20), (1, 9), (0, 4)),
        ("heavy", (10, 30), (1, 4), (0, 9)),
    ],
)
def test_preset_ranges(preset, burst, priority, arrival):
    for p in generate_workload(30, preset=preset, seed=42):
        assert burst[0] <= p.burst_time <= burst[1]
        assert priority[0] <= p.priority <= priority[1]
        assert arrival[0] <= p.arrival_time <= arrival[1]


@pytest.mark.parametrize("count", [0, MAX_PROCESS_COUNT + 1])
def test_count_bounds(count):
    with pytest.raises(InvalidInput):
        generate_workload(count)


def test_unknown_preset():
    with pytest.raises(InvalidInput, match="preset"):
        generate_workload(3, preset="bursty")
    assert "heavy" in PRESETS
