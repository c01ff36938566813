from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from .metrics import average_response_time, cpu_utilization, summarize_process_metrics, throughput
from .models import ScheduleResult

logger = logging.getLogger(__name__)

EXPORT_HEADER = [
    "Algo Name",
    "Avg Waiting",
    "Avg Turnaround",
    "Avg Response",
    "CPU Util (%)",
    "Throughput",
    "Context Switches",
    "Distinct Procs Served",
    "Interval Size",
]


@dataclass
class ComparisonRow:
    algorithm: str
    avg_waiting: float
    avg_turnaround: float
    avg_response: float
    cpu_utilization: float
    throughput: float
    context_switches: int
    distinct_served: float
    interval_size: int

    def as_csv_row(self) -> List[str]:
        return [
            self.algorithm,
            f"{self.avg_waiting:.1f}",
            f"{self.avg_turnaround:.1f}",
            f"{self.avg_response:.1f}",
            f"{self.cpu_utilization:.1f}",
            f"{self.throughput:.4f}",
            str(self.context_switches),
            f"{self.distinct_served:.4f}",
            str(self.interval_size),
        ]


def comparison_row(result: ScheduleResult) -> ComparisonRow:
    """Summarize one run the way the comparison export lays it out."""
    processes = result.processes
    # Clamped to 1 so a degenerate span never divides by zero.
    total = max(1, max(p.finish_time for p in processes) - min(p.arrival_time for p in processes))
    averages = summarize_process_metrics(processes)
    return ComparisonRow(
        algorithm=result.algorithm,
        avg_waiting=averages["avg_waiting"],
        avg_turnaround=averages["avg_turnaround"],
        avg_response=average_response_time(processes),
        cpu_utilization=cpu_utilization(processes, total),
        throughput=throughput(processes, total),
        context_switches=result.context_switches,
        distinct_served=result.summary.average_processes_served,
        interval_size=result.summary.interval_size,
    )


def comparison_rows(results: Dict[str, ScheduleResult]) -> List[ComparisonRow]:
    return [comparison_row(r) for r in results.values()]


def unique_path(path: str | Path) -> Path:
    """
    Return ``path`` if it is free, else ``name(1).ext``, ``name(2).ext``, ...
    """
    path = Path(path)
    candidate = path
    count = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.stem}({count}){path.suffix}")
        count += 1
    return candidate


def export_comparison(results: Dict[str, ScheduleResult], path: str | Path, overwrite: bool = False) -> Path:
    """Write one CSV row per algorithm and return the path actually written."""
    target = Path(path) if overwrite else unique_path(path)
    with target.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(EXPORT_HEADER)
        for row in comparison_rows(results):
            writer.writerow(row.as_csv_row())
    logger.info("Wrote comparison of %d algorithms to %s", len(results), target)
    return target
