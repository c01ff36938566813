from __future__ import annotations

import math
from collections import Counter
from typing import Iterable, Optional, Set

from .models import RunSummary


def interval_size_for(burst_times: Iterable[int]) -> int:
    return math.isqrt(sum(burst_times))


class SwitchTracker:
    """
    Context-switch and interval bookkeeping shared by every algorithm.

    A switch is charged to the process being switched *away from*. The time
    elapsed between consecutive dispatch points accumulates until it reaches
    ``interval_size``; at that point the number of distinct processes that
    were switched away from during the interval, divided by the interval
    size, is folded into a running mean on the run summary.
    """

    def __init__(self, interval_size: int) -> None:
        self.summary = RunSummary(interval_size=interval_size)
        self.switches: Counter[str] = Counter()
        self._previous_pid: Optional[str] = None
        self._previous_time = 0
        self._elapsed = 0
        self._seen: Set[str] = set()

    def dispatch(self, pid: str, now: int) -> bool:
        """
        Record that ``pid`` is dispatched at ``now``.

        Returns True when this dispatch is a context switch.
        """
        switched = self._previous_pid is not None and self._previous_pid != pid
        if switched:
            self.switches[self._previous_pid] += 1
            self._seen.add(self._previous_pid)
            self._elapsed += now - self._previous_time
            if self._elapsed >= self.summary.interval_size:
                self._close_interval()
        self._previous_time = now
        self._previous_pid = pid
        return switched

    def _close_interval(self) -> None:
        summary = self.summary
        summary.intervals_seen += 1
        n = summary.intervals_seen
        sample = len(self._seen) / summary.interval_size
        summary.average_processes_served = (summary.average_processes_served * (n - 1) + sample) / n
        self._seen.clear()
        # Only one interval is consumed per switch; the rest carries over.
        self._elapsed -= summary.interval_size
