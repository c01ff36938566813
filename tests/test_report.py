from pathlib import Path

from schedsim.algorithms import ALGORITHMS, run_all, schedule_fcfs
from schedsim.models import ProcessDescriptor
from schedsim.report import EXPORT_HEADER, comparison_row, export_comparison, unique_path


def _procs():
    return [
        ProcessDescriptor("P1", 0, 6),
        ProcessDescriptor("P2", 2, 8),
        ProcessDescriptor("P3", 4, 7),
    ]


def test_comparison_row_formatting():
    row = comparison_row(schedule_fcfs(_procs()))
    assert row.as_csv_row() == ["FCFS", "4.7", "11.7", "4.7", "91.3", "0.1429", "2", "0.2500", "4"]


def test_unique_path_numbers_existing_files(tmp_path: Path):
    target = tmp_path / "AlgoData.csv"
    assert unique_path(target) == target
    target.write_text("")
    assert unique_path(target) == tmp_path / "AlgoData(1).csv"
    (tmp_path / "AlgoData(1).csv").write_text("")
    assert unique_path(target) == tmp_path / "AlgoData(2).csv"


def test_export_comparison_writes_all_algorithms(tmp_path: Path):
    results = run_all(_procs())
    first = export_comparison(results, tmp_path / "AlgoData.csv")
    second = export_comparison(results, tmp_path / "AlgoData.csv")

    assert first.name == "AlgoData.csv"
    assert second.name == "AlgoData(1).csv"

    lines = first.read_text().splitlines()
    assert lines[0] == ",".join(EXPORT_HEADER)
    assert len(lines) == 1 + len(ALGORITHMS)
    assert [line.split(",")[0] for line in lines[1:]] == ["FCFS", "SJF", "Priority", "Round Robin", "MLFQ", "CFS"]


def test_export_overwrite(tmp_path: Path):
    target = tmp_path / "AlgoData.csv"
    target.write_text("old")
    written = export_comparison(run_all(_procs()), target, overwrite=True)
    assert written == target
    assert target.read_text().startswith("Algo Name")
