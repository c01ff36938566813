from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Sequence

from .errors import InvalidInput
from .models import ProcessDescriptor

logger = logging.getLogger(__name__)

# Column names written by save_workload; also accepted on load.
CSV_HEADER = ["Process ID", "Burst Time", "Priority", "Arrival Time"]

_FIELD_ALIASES = {
    "pid": ("pid", "Process ID"),
    "arrival_time": ("arrival_time", "Arrival Time"),
    "burst_time": ("burst_time", "Burst Time"),
    "priority": ("priority", "Priority"),
}


def load_workload(path: str | Path) -> List[ProcessDescriptor]:
    """
    Load a workload from a JSON or CSV file into a list of ProcessDescriptor objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def save_workload(processes: Sequence[ProcessDescriptor], path: str | Path) -> Path:
    """Write a workload as CSV using the ``Process ID,Burst Time,Priority,Arrival Time`` layout."""
    path = Path(path)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for p in processes:
            writer.writerow([p.pid, p.burst_time, p.priority, p.arrival_time])
    return path


def _load_json(path: Path) -> List[ProcessDescriptor]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, Iterable) or isinstance(raw, (str, dict)):
        raise InvalidInput("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[ProcessDescriptor]:
    processes: List[ProcessDescriptor] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f, skipinitialspace=True)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _lookup(mapping: Mapping, field: str):
    for key in _FIELD_ALIASES[field]:
        if key in mapping:
            return mapping[key]
    raise KeyError(field)


def _process_from_mapping(mapping) -> ProcessDescriptor:
    try:
        pid = str(_lookup(mapping, "pid")).strip()
        arrival_time = int(_lookup(mapping, "arrival_time"))
        burst_time = int(_lookup(mapping, "burst_time"))
        try:
            priority_val = _lookup(mapping, "priority")
        except KeyError:
            priority_val = None
        priority = int(priority_val) if priority_val not in (None, "") else 0
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid process entry: {mapping!r}") from exc

    return ProcessDescriptor(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
