from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .errors import InvalidInput


@dataclass(frozen=True)
class ProcessDescriptor:
    """Immutable input record for one simulated process."""

    pid: str
    arrival_time: int
    burst_time: int
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.pid:
            raise InvalidInput("process id must be a non-empty string")
        if self.arrival_time < 0:
            raise InvalidInput(f"{self.pid}: arrival_time cannot be negative ({self.arrival_time})")
        if self.burst_time <= 0:
            raise InvalidInput(f"{self.pid}: burst_time must be strictly positive ({self.burst_time})")


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.

    ``level`` is the MLFQ queue the slice was served from and ``vruntime``
    the CFS virtual runtime the process held when it was dispatched.
    """

    pid: str
    start_time: int
    end_time: int
    level: Optional[int] = None
    vruntime: Optional[float] = None

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class ProcessResult:
    pid: str
    arrival_time: int
    burst_time: int
    priority: int
    start_time: int
    finish_time: int = 0
    waiting_time: int = 0
    turnaround_time: int = 0
    num_times_switched: int = 0

    @property
    def response_time(self) -> int:
        return self.start_time - self.arrival_time

    def finalize(self, finish_time: int) -> None:
        self.finish_time = finish_time
        self.turnaround_time = finish_time - self.arrival_time
        self.waiting_time = self.turnaround_time - self.burst_time


@dataclass
class RunSummary:
    """
    Run-wide aggregates produced alongside the per-process results.

    ``interval_size`` is ``floor(sqrt(total burst))`` and
    ``average_processes_served`` the running mean of distinct processes
    switched away from per interval, divided by the interval size.
    """

    interval_size: int
    average_processes_served: float = 0.0
    intervals_seen: int = 0


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    total_time: int
    throughput: float
    cpu_utilization: float
    context_switches: int
    average_response_time: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    summary: RunSummary
    processes: List[ProcessResult] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    system: Optional[SystemMetrics] = None

    @property
    def context_switches(self) -> int:
        return sum(p.num_times_switched for p in self.processes)

    def by_pid(self, pid: str) -> ProcessResult:
        for p in self.processes:
            if p.pid == pid:
                return p
        raise KeyError(pid)
