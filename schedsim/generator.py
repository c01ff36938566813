"""Random workload generation with a handful of named load profiles."""

from __future__ import annotations

import random
from typing import Callable, Dict, List, Optional, Tuple

from .errors import InvalidInput
from .models import ProcessDescriptor

MIN_PROCESS_COUNT = 1
MAX_PROCESS_COUNT = 100

# (burst_time, priority, arrival_time) for the i-th of n processes.
_Row = Tuple[int, int, int]


def _default(rng: random.Random, i: int, n: int) -> _Row:
    return rng.randint(1, 10), i + 1, 0


def _random(rng: random.Random, i: int, n: int) -> _Row:
    return rng.randint(1, 20), rng.randint(1, n), rng.randint(0, 9)


def _short(rng: random.Random, i: int, n: int) -> _Row:
    return rng.randint(1, 5), rng.randint(1, 4), 0


def _mixed(rng: random.Random, i: int, n: int) -> _Row:
    return rng.randint(1, 20), rng.randint(1, 9), rng.randint(0, 4)


def _heavy(rng: random.Random, i: int, n: int) -> _Row:
    return rng.randint(10, 30), rng.randint(1, 4), rng.randint(0, 9)


def _priority_demo(rng: random.Random, i: int, n: int) -> _Row:
    return rng.randint(5, 14), n - i, 0


PRESETS: Dict[str, Callable[[random.Random, int, int], _Row]] = {
    "default": _default,
    "random": _random,
    "short": _short,
    "mixed": _mixed,
    "heavy": _heavy,
    "priority-demo": _priority_demo,
}


def generate_workload(count: int, preset: str = "default", seed: Optional[int] = None) -> List[ProcessDescriptor]:
    """
    Build ``count`` processes named ``P1..Pn`` using one of ``PRESETS``.

    The same seed always yields the same workload.
    """
    if not MIN_PROCESS_COUNT <= count <= MAX_PROCESS_COUNT:
        raise InvalidInput(f"process count must be between {MIN_PROCESS_COUNT} and {MAX_PROCESS_COUNT}, got {count}")
    try:
        row_for = PRESETS[preset]
    except KeyError:
        raise InvalidInput(f"Unknown preset '{preset}' (choose from {', '.join(PRESETS)})") from None

    rng = random.Random(seed)
    processes: List[ProcessDescriptor] = []
    for i in range(count):
        burst_time, priority, arrival_time = row_for(rng, i, count)
        processes.append(
            ProcessDescriptor(pid=f"P{i + 1}", arrival_time=arrival_time, burst_time=burst_time, priority=priority)
        )
    return processes
