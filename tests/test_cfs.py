from collections import defaultdict

import pytest

from schedsim.algorithms import NICE_0_LOAD, priority_to_weight, schedule_cfs
from schedsim.generator import PRESETS, generate_workload
from schedsim.models import ProcessDescriptor


@pytest.mark.parametrize(
    "priority, weight",
    [(1, 20.0), (10, 11.0), (20, 1.0), (0, 20.0), (-5, 20.0), (42, 1.0)],
)
def test_priority_to_weight_clamps(priority, weight):
    assert priority_to_weight(priority) == weight


def test_equal_weights_share_the_cpu():
    res = schedule_cfs([ProcessDescriptor("A", 0, 10, priority=10), ProcessDescriptor("B", 0, 10, priority=10)])
    # Total weight 22, so each slice is 20 * 11/22 = 10 units.
    assert abs(res.by_pid("A").finish_time - res.by_pid("B").finish_time) <= 10
    assert res.system.cpu_busy_time == 20


def test_equal_weights_alternate_and_stay_close():
    res = schedule_cfs([ProcessDescriptor("A", 0, 20, priority=10), ProcessDescriptor("B", 0, 20, priority=10)])
    assert [(s.pid, s.start_time, s.end_time) for s in res.timeline] == [
        ("A", 0, 10),
        ("B", 10, 20),
        ("A", 20, 30),
        ("B", 30, 40),
    ]
    one_slice = 10 * NICE_0_LOAD / 11.0
    for a, b in zip(res.timeline[::2], res.timeline[1::2]):
        assert abs(a.vruntime - b.vruntime) <= one_slice


def test_heavier_process_gets_longer_slices():
    res = schedule_cfs([ProcessDescriptor("A", 0, 30, priority=1), ProcessDescriptor("B", 0, 30, priority=20)])
    assert [(s.pid, s.duration) for s in res.timeline] == [
        ("A", 19),
        ("B", 1),
        ("A", 11),
        ("B", 20),
        ("B", 9),
    ]
    assert res.by_pid("A").finish_time == 31
    assert res.by_pid("B").finish_time == 60
    # B is re-dispatched back to back, which is not a switch.
    assert res.by_pid("A").num_times_switched == 2
    assert res.by_pid("B").num_times_switched == 1


def test_vruntime_accrues_by_weight():
    res = schedule_cfs([ProcessDescriptor("A", 0, 30, priority=1), ProcessDescriptor("B", 0, 30, priority=20)])
    a_slices = [s for s in res.timeline if s.pid == "A"]
    assert a_slices[0].vruntime == 0.0
    assert a_slices[1].vruntime == pytest.approx(19 * NICE_0_LOAD / 20.0)


def test_ties_on_vruntime_break_by_pid():
    res = schedule_cfs([ProcessDescriptor("b", 0, 3), ProcessDescriptor("a", 0, 3)])
    assert res.timeline[0].pid == "a"


def test_unarrived_weight_flag_changes_slice_size():
    procs = [ProcessDescriptor("A", 0, 20, priority=10), ProcessDescriptor("B", 100, 10, priority=10)]

    all_unfinished = schedule_cfs(procs)
    arrived_only = schedule_cfs(procs, include_unarrived_weight=False)

    # B has not arrived yet but still halves A's slice when every unfinished process is counted.
    assert [s.duration for s in all_unfinished.timeline if s.pid == "A"] == [10, 10]
    assert [s.duration for s in arrived_only.timeline if s.pid == "A"] == [20]
    assert all_unfinished.by_pid("A").finish_time == arrived_only.by_pid("A").finish_time == 20
    assert all_unfinished.by_pid("B").start_time == arrived_only.by_pid("B").start_time == 100


def test_late_arrival_starts_at_zero_vruntime():
    res = schedule_cfs([ProcessDescriptor("A", 0, 40, priority=10), ProcessDescriptor("B", 5, 5, priority=10)])
    b_first = next(s for s in res.timeline if s.pid == "B")
    assert b_first.vruntime == 0.0
    assert b_first.start_time == 10


@pytest.mark.parametrize("preset", sorted(PRESETS))
@pytest.mark.parametrize("include_unarrived_weight", [True, False])
def test_executed_time_and_vruntime_monotonic(preset, include_unarrived_weight):
    procs = generate_workload(15, preset=preset, seed=11)
    res = schedule_cfs(procs, include_unarrived_weight=include_unarrived_weight)

    executed = defaultdict(int)
    vruntimes = defaultdict(list)
    for s in res.timeline:
        executed[s.pid] += s.duration
        vruntimes[s.pid].append(s.vruntime)

    assert sum(executed.values()) == sum(p.burst_time for p in procs)
    for p in procs:
        assert executed[p.pid] == p.burst_time
        assert vruntimes[p.pid] == sorted(vruntimes[p.pid])
