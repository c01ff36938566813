from rich.console import Console

from schedsim.gantt import build_rich_gantt, merge_slices
from schedsim.models import ScheduledSlice


def test_merge_joins_back_to_back_runs_of_one_process():
    merged = merge_slices(
        [
            ScheduledSlice("P1", 0, 4),
            ScheduledSlice("P1", 4, 8),
            ScheduledSlice("P2", 8, 10),
            ScheduledSlice("P1", 12, 14),
        ]
    )
    assert [(s.pid, s.start_time, s.end_time) for s in merged] == [("P1", 0, 8), ("P2", 8, 10), ("P1", 12, 14)]


def test_build_rich_gantt_renders_labels_and_marks():
    panel, marks = build_rich_gantt([ScheduledSlice("P1", 0, 4), ScheduledSlice("P2", 6, 9)])
    console = Console(record=True, width=80)
    console.print(panel)
    text = console.export_text()
    assert "P1" in text
    assert "P2" in text
    assert marks.split() == ["0", "4", "6", "9"]


def test_build_rich_gantt_empty():
    panel, marks = build_rich_gantt([])
    assert marks == ""
