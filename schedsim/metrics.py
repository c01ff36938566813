from __future__ import annotations

from typing import Sequence

from .errors import InvalidInput
from .models import ProcessResult, ScheduleResult, SystemMetrics


def _require_results(results: Sequence[ProcessResult]) -> None:
    if not results:
        raise InvalidInput("metrics need at least one completed process")


def total_time(results: Sequence[ProcessResult]) -> int:
    """Span of the run: last finish minus first arrival."""
    _require_results(results)
    return max(r.finish_time for r in results) - min(r.arrival_time for r in results)


def cpu_utilization(results: Sequence[ProcessResult], total: int) -> float:
    """
    Percentage of time spent on useful work.

    Each context switch counts as one unit of overhead competing with the
    processes' burst time.
    """
    _require_results(results)
    if total <= 0:
        raise InvalidInput(f"total time must be positive, got {total}")
    busy = sum(r.burst_time for r in results)
    switches = sum(r.num_times_switched for r in results)
    return busy / (total + switches) * 100


def throughput(results: Sequence[ProcessResult], total: int) -> float:
    _require_results(results)
    if total <= 0:
        raise InvalidInput(f"total time must be positive, got {total}")
    return len(results) / total


def average_response_time(results: Sequence[ProcessResult]) -> float:
    _require_results(results)
    return sum(r.response_time for r in results) / len(results)


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given populated per-process metrics
    and timeline slices.
    """
    total = total_time(result.processes)
    cpu_busy_time = sum(slice_.duration for slice_ in result.timeline)

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        total_time=total,
        throughput=throughput(result.processes, total),
        cpu_utilization=cpu_utilization(result.processes, total),
        context_switches=result.context_switches,
        average_response_time=average_response_time(result.processes),
    )
    result.system = system
    return system


def summarize_process_metrics(processes: Sequence[ProcessResult]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }
