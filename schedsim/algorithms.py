from __future__ import annotations

import logging
import math
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Sequence, Tuple

from .accounting import SwitchTracker, interval_size_for
from .errors import InvalidInput, validate_processes, validate_quantum
from .metrics import compute_system_metrics
from .models import ProcessDescriptor, ProcessResult, ScheduleResult, ScheduledSlice
from .runqueue import RunQueue

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 4
MLFQ_QUANTA: Tuple[int, ...] = (4, 16, 24)

NICE_0_LOAD = 1024.0
TARGET_LATENCY = 20
FALLBACK_TIMESLICE = 4


def _start_result(p: ProcessDescriptor, start_time: int) -> ProcessResult:
    return ProcessResult(
        pid=p.pid,
        arrival_time=p.arrival_time,
        burst_time=p.burst_time,
        priority=p.priority,
        start_time=start_time,
    )


def _finish(
    algorithm: str,
    quantum: Optional[int],
    tracker: SwitchTracker,
    results: Sequence[ProcessResult],
    timeline: List[ScheduledSlice],
) -> ScheduleResult:
    for r in results:
        r.num_times_switched = tracker.switches[r.pid]

    # sorted() is stable, so equal start times keep dispatch order.
    ordered = sorted(results, key=lambda r: r.start_time)
    result = ScheduleResult(
        algorithm=algorithm,
        quantum=quantum,
        summary=tracker.summary,
        processes=ordered,
        timeline=timeline,
    )
    compute_system_metrics(result)
    logger.info(
        "%s finished %d processes at t=%d with %d context switches",
        algorithm,
        len(ordered),
        max(r.finish_time for r in ordered),
        result.context_switches,
    )
    return result


def schedule_fcfs(processes: Sequence[ProcessDescriptor]) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes run strictly in arrival order; equal arrivals keep their input
    order.
    """
    validate_processes(processes)
    processes_sorted = sorted(processes, key=lambda p: p.arrival_time)

    tracker = SwitchTracker(interval_size_for(p.burst_time for p in processes))
    time = 0
    timeline: List[ScheduledSlice] = []
    results: List[ProcessResult] = []

    for p in processes_sorted:
        start_time = max(time, p.arrival_time)
        tracker.dispatch(p.pid, time)

        end_time = start_time + p.burst_time
        timeline.append(ScheduledSlice(pid=p.pid, start_time=start_time, end_time=end_time))

        r = _start_result(p, start_time)
        r.finalize(end_time)
        results.append(r)

        time = end_time

    return _finish("FCFS", None, tracker, results, timeline)


def _schedule_non_preemptive(
    algorithm: str,
    processes: Sequence[ProcessDescriptor],
    select: Callable[[List[ProcessDescriptor]], ProcessDescriptor],
) -> ScheduleResult:
    # Greedy loop shared by SJF and Priority: pick among arrived processes only.
    validate_processes(processes)
    remaining: List[ProcessDescriptor] = list(processes)

    tracker = SwitchTracker(interval_size_for(p.burst_time for p in processes))
    time = 0
    timeline: List[ScheduledSlice] = []
    results: List[ProcessResult] = []

    while remaining:
        ready = [p for p in remaining if p.arrival_time <= time]

        if not ready:
            # If nothing is ready, jump time to the next arrival.
            time = min(p.arrival_time for p in remaining)
            continue

        p = select(ready)
        tracker.dispatch(p.pid, time)
        logger.debug("%s: dispatch %s at t=%d", algorithm, p.pid, time)

        start_time = time
        end_time = start_time + p.burst_time
        timeline.append(ScheduledSlice(pid=p.pid, start_time=start_time, end_time=end_time))

        r = _start_result(p, start_time)
        r.finalize(end_time)
        results.append(r)

        remaining.remove(p)
        time = end_time

    return _finish(algorithm, None, tracker, results, timeline)


def schedule_sjf(processes: Sequence[ProcessDescriptor]) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time; ties go to the
    earlier arrival, then to input order.
    """
    return _schedule_non_preemptive(
        "SJF",
        processes,
        lambda ready: min(ready, key=lambda x: (x.burst_time, x.arrival_time)),
    )


def schedule_priority(processes: Sequence[ProcessDescriptor]) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Higher numeric priority value wins. Ties go to the earlier arrival, then
    to input order. A running process is never preempted by a later,
    higher-priority arrival.
    """
    return _schedule_non_preemptive(
        "Priority",
        processes,
        lambda ready: min(ready, key=lambda x: (-x.priority, x.arrival_time)),
    )


def schedule_rr(processes: Sequence[ProcessDescriptor], quantum: int = DEFAULT_QUANTUM) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive while a slice is running are queued before the
    preempted process is put back at the tail.
    """
    validate_processes(processes)
    validate_quantum(quantum)

    remaining = {p.pid: p.burst_time for p in processes}
    not_arrived: Deque[ProcessDescriptor] = deque(sorted(processes, key=lambda p: p.arrival_time))
    ready: Deque[ProcessDescriptor] = deque()

    tracker = SwitchTracker(interval_size_for(remaining.values()))
    time = 0
    timeline: List[ScheduledSlice] = []
    results: Dict[str, ProcessResult] = {}

    def admit_arrivals(current_time: int) -> None:
        while not_arrived and not_arrived[0].arrival_time <= current_time:
            ready.append(not_arrived.popleft())

    while ready or not_arrived:
        admit_arrivals(time)

        if not ready:
            # Jump to next arrival if CPU is idle
            time = not_arrived[0].arrival_time
            continue

        p = ready.popleft()
        tracker.dispatch(p.pid, time)

        # If this is the first time the process runs, record its start
        if p.pid not in results:
            results[p.pid] = _start_result(p, time)

        run_time = min(quantum, remaining[p.pid])
        logger.debug("RR: run %s for %d at t=%d", p.pid, run_time, time)
        timeline.append(ScheduledSlice(pid=p.pid, start_time=time, end_time=time + run_time))

        time += run_time
        remaining[p.pid] -= run_time

        # Enqueue any new arrivals that appeared during this slice
        admit_arrivals(time)

        if remaining[p.pid] == 0:
            results[p.pid].finalize(time)
        else:
            ready.append(p)

    return _finish("Round Robin", quantum, tracker, list(results.values()), timeline)


def schedule_mlfq(
    processes: Sequence[ProcessDescriptor],
    quanta: Sequence[int] = MLFQ_QUANTA,
) -> ScheduleResult:
    """
    Multi-Level Feedback Queue with one round-robin queue per quantum.

    - New arrivals always enter the highest-priority queue (level 0).
    - A process that does not finish within its level's quantum is demoted
      one level, down to the lowest. There is no promotion or aging.
    - If the CPU is idle, time jumps to the next arrival.
    """
    validate_processes(processes)
    if not quanta:
        raise InvalidInput("MLFQ needs at least one queue level")
    for q in quanta:
        validate_quantum(q)

    remaining = {p.pid: p.burst_time for p in processes}
    not_arrived: Deque[ProcessDescriptor] = deque(sorted(processes, key=lambda p: p.arrival_time))
    queues: List[Deque[ProcessDescriptor]] = [deque() for _ in quanta]
    lowest = len(queues) - 1

    tracker = SwitchTracker(interval_size_for(remaining.values()))
    time = 0
    timeline: List[ScheduledSlice] = []
    results: Dict[str, ProcessResult] = {}

    def admit_arrivals(current_time: int) -> None:
        while not_arrived and not_arrived[0].arrival_time <= current_time:
            queues[0].append(not_arrived.popleft())

    while any(queues) or not_arrived:
        admit_arrivals(time)

        # Pick highest-priority non-empty queue
        level = next((i for i, q in enumerate(queues) if q), None)
        if level is None:
            time = not_arrived[0].arrival_time
            continue

        p = queues[level].popleft()
        tracker.dispatch(p.pid, time)

        if p.pid not in results:
            results[p.pid] = _start_result(p, time)

        run_time = min(quanta[level], remaining[p.pid])
        timeline.append(ScheduledSlice(pid=p.pid, start_time=time, end_time=time + run_time, level=level))

        time += run_time
        remaining[p.pid] -= run_time

        admit_arrivals(time)

        if remaining[p.pid] == 0:
            results[p.pid].finalize(time)
        else:
            next_level = min(level + 1, lowest)
            if next_level != level:
                logger.debug("MLFQ: demoted %s from Q%d to Q%d at t=%d", p.pid, level, next_level, time)
            queues[next_level].append(p)

    return _finish("MLFQ", None, tracker, list(results.values()), timeline)


def priority_to_weight(priority: int) -> float:
    """Map a priority to a CFS load weight; smaller numbers weigh more."""
    return float(21 - max(1, min(20, priority)))


def schedule_cfs(
    processes: Sequence[ProcessDescriptor],
    include_unarrived_weight: bool = True,
) -> ScheduleResult:
    """
    Completely-Fair-style scheduling over a red-black run queue.

    Every runnable process sits in the run queue keyed by its virtual
    runtime. The process with the smallest vruntime runs for a slice of
    ``TARGET_LATENCY`` proportional to its share of the total weight, and is
    charged ``executed * NICE_0_LOAD / weight`` of vruntime, so heavier
    processes are picked again sooner.

    With ``include_unarrived_weight`` (the default) the slice size sums
    the weights of every unfinished process, including ones that have not
    arrived yet. Pass False to count only processes already admitted.
    """
    validate_processes(processes)

    remaining = {p.pid: p.burst_time for p in processes}
    weights = {p.pid: priority_to_weight(p.priority) for p in processes}
    not_arrived: Deque[ProcessDescriptor] = deque(sorted(processes, key=lambda p: p.arrival_time))
    admitted: set[str] = set()
    vruntimes: Dict[str, float] = {}
    runqueue = RunQueue()

    tracker = SwitchTracker(interval_size_for(remaining.values()))
    time = 0
    timeline: List[ScheduledSlice] = []
    results: Dict[str, ProcessResult] = {}

    def admit_arrivals(current_time: int) -> None:
        while not_arrived and not_arrived[0].arrival_time <= current_time:
            p = not_arrived.popleft()
            vruntimes[p.pid] = 0.0
            admitted.add(p.pid)
            runqueue.insert(0.0, p.pid, p)

    while not runqueue.is_empty or not_arrived:
        admit_arrivals(time)

        if runqueue.is_empty:
            time = not_arrived[0].arrival_time
            continue

        total_weight = sum(
            weights[pid]
            for pid, left in remaining.items()
            if left > 0 and (include_unarrived_weight or pid in admitted)
        )

        entry = runqueue.pop_min()
        p = entry.value
        tracker.dispatch(p.pid, time)

        if p.pid not in results:
            results[p.pid] = _start_result(p, time)

        weight = weights[p.pid]
        if total_weight <= 0:
            timeslice = FALLBACK_TIMESLICE
        else:
            timeslice = max(1, math.floor(TARGET_LATENCY * (weight / total_weight)))

        executed = min(timeslice, remaining[p.pid])
        logger.debug(
            "CFS: run %s for %d at t=%d (vruntime=%.2f, slice=%d)", p.pid, executed, time, entry.vruntime, timeslice
        )
        timeline.append(
            ScheduledSlice(pid=p.pid, start_time=time, end_time=time + executed, vruntime=entry.vruntime)
        )

        time += executed
        remaining[p.pid] -= executed
        vruntimes[p.pid] = entry.vruntime + executed * (NICE_0_LOAD / weight)

        admit_arrivals(time)

        if remaining[p.pid] == 0:
            results[p.pid].finalize(time)
        else:
            runqueue.insert(vruntimes[p.pid], p.pid, p)

    return _finish("CFS", None, tracker, list(results.values()), timeline)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_priority,
    "rr": schedule_rr,
    "mlfq": schedule_mlfq,
    "cfs": schedule_cfs,
}


def run_algorithm(
    name: str,
    processes: Sequence[ProcessDescriptor],
    quantum: Optional[int] = None,
    include_unarrived_weight: bool = True,
) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. ``quantum`` only applies to
    round-robin and ``include_unarrived_weight`` only to CFS.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise InvalidInput(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    # Each run gets its own list; descriptors are frozen so sharing them is safe.
    processes = list(processes)
    if name == "rr":
        return schedule_rr(processes, quantum=DEFAULT_QUANTUM if quantum is None else quantum)
    if name == "cfs":
        return schedule_cfs(processes, include_unarrived_weight=include_unarrived_weight)
    return ALGORITHMS[name](processes)


def run_all(
    processes: Sequence[ProcessDescriptor],
    quantum: int = DEFAULT_QUANTUM,
    include_unarrived_weight: bool = True,
) -> Dict[str, ScheduleResult]:
    """Run every algorithm on an independent copy of the same workload."""
    return {
        name: run_algorithm(name, processes, quantum=quantum, include_unarrived_weight=include_unarrived_weight)
        for name in ALGORITHMS
    }
