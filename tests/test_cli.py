from pathlib import Path

import pytest

from schedsim.cli import build_parser, main
from schedsim.workload_io import load_workload


def _workload(tmp_path: Path) -> Path:
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\nP1,0,6,1\nP2,2,8,2\nP3,4,7,3\n")
    return p


def test_run_prints_results(tmp_path: Path, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(_workload(tmp_path))]) == 0
    out = capsys.readouterr().out
    assert "FCFS" in out
    assert "Per-process results" in out
    assert "P3" in out


def test_run_round_robin_with_quantum(tmp_path: Path, capsys):
    assert main(["run", "-a", "rr", "-q", "3", "-w", str(_workload(tmp_path))]) == 0
    out = capsys.readouterr().out
    assert "Quantum:" in out


def test_run_with_generated_workload(capsys):
    assert main(["run", "-a", "cfs", "--preset", "mixed", "-n", "4", "--seed", "2", "--arrived-weight-only"]) == 0
    assert "CFS" in capsys.readouterr().out


def test_compare_and_export(tmp_path: Path, capsys):
    target = tmp_path / "AlgoData.csv"
    assert main(["compare", "-w", str(_workload(tmp_path)), "-o", str(target)]) == 0
    out = capsys.readouterr().out
    assert "Algorithm comparison" in out
    assert target.exists()
    assert len(target.read_text().splitlines()) == 7


def test_generate_writes_loadable_csv(tmp_path: Path, capsys):
    target = tmp_path / "ProcessData.csv"
    assert main(["generate", str(target), "--preset", "heavy", "-n", "9", "--seed", "1"]) == 0
    assert len(load_workload(target)) == 9


def test_invalid_quantum_is_reported(tmp_path: Path, capsys):
    assert main(["run", "-a", "rr", "-q", "0", "-w", str(_workload(tmp_path))]) == 2
    assert "Error" in capsys.readouterr().out


def test_missing_workload_file_is_reported(tmp_path: Path, capsys):
    assert main(["run", "-a", "sjf", "-w", str(tmp_path / "nope.csv")]) == 2
    assert "Error" in capsys.readouterr().out


def test_workload_source_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["run", "-a", "fcfs"])
