from __future__ import annotations

from typing import Sequence


class InvalidInput(ValueError):
    """Raised when a workload or a policy parameter cannot be simulated."""


def validate_processes(processes: Sequence) -> None:
    """
    Reject workloads the algorithms cannot run to completion.

    Field-level checks live on ``ProcessDescriptor`` itself; this covers the
    list as a whole.
    """
    if not processes:
        raise InvalidInput("at least one process is required")

    seen: set[str] = set()
    for p in processes:
        if p.pid in seen:
            raise InvalidInput(f"duplicate process id '{p.pid}'")
        seen.add(p.pid)
        if p.burst_time <= 0:
            raise InvalidInput(f"{p.pid}: burst_time must be strictly positive ({p.burst_time})")
        if p.arrival_time < 0:
            raise InvalidInput(f"{p.pid}: arrival_time cannot be negative ({p.arrival_time})")


def validate_quantum(quantum) -> int:
    if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum <= 0:
        raise InvalidInput(f"quantum must be a positive integer, got {quantum!r}")
    return quantum
