"""
CPU scheduling simulator package.

Runs FCFS, SJF, Priority, Round Robin, MLFQ and a completely-fair-style
scheduler over a fully known workload and reports per-process timings plus
run-wide performance metrics.
"""

from .algorithms import (
    ALGORITHMS,
    run_algorithm,
    run_all,
    schedule_cfs,
    schedule_fcfs,
    schedule_mlfq,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
)
from .errors import InvalidInput
from .models import ProcessDescriptor, ProcessResult, RunSummary, ScheduleResult

__all__ = [
    "ALGORITHMS",
    "InvalidInput",
    "ProcessDescriptor",
    "ProcessResult",
    "RunSummary",
    "ScheduleResult",
    "run_algorithm",
    "run_all",
    "schedule_cfs",
    "schedule_fcfs",
    "schedule_mlfq",
    "schedule_priority",
    "schedule_rr",
    "schedule_sjf",
]
