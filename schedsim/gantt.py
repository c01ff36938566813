from __future__ import annotations

from typing import Dict, List, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def merge_slices(slices: Sequence[ScheduledSlice]) -> List[ScheduledSlice]:
    """
    Join back-to-back slices of the same process into one bar.

    A process re-dispatched straight after its own slice is not a context
    switch, so the chart shows it as one run.
    """
    merged: List[ScheduledSlice] = []
    for sl in sorted(slices, key=lambda s: (s.start_time, s.end_time)):
        last = merged[-1] if merged else None
        if last is not None and last.pid == sl.pid and last.end_time == sl.start_time:
            merged[-1] = ScheduledSlice(pid=last.pid, start_time=last.start_time, end_time=sl.end_time)
        else:
            merged.append(ScheduledSlice(pid=sl.pid, start_time=sl.start_time, end_time=sl.end_time))
    return merged


def build_rich_gantt(slices: Sequence[ScheduledSlice], title: str = "Gantt Chart") -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.

    Idle gaps are drawn as dotted space.
    """
    if not slices:
        return Panel("No execution", title=title), ""

    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = COLORS[len(pid_to_color) % len(COLORS)]
        return pid_to_color[pid]

    bars = Text()
    labels = Text()
    time_marks = "0"
    last_time = 0

    for sl in merge_slices(slices):
        idle_gap = sl.start_time - last_time
        if idle_gap > 0:
            bars.append("·" * idle_gap, style="dim")
            labels.append(" " * idle_gap)
            time_marks += f"{sl.start_time:>{idle_gap + 1}}"

        width = max(1, sl.duration)
        bars.append(" " * width, style=f"on {pid_color(sl.pid)}")
        labels.append(sl.pid[:width].ljust(width), style="bold")

        last_time = sl.end_time
        time_marks += f"{last_time:>{width + 1}}"

    table = Table.grid(padding=(0, 0))
    table.add_row(bars)
    table.add_row(labels)

    return Panel.fit(table, title=title), time_marks
