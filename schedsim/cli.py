from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Sequence

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import ALGORITHMS, DEFAULT_QUANTUM, run_algorithm, run_all
from .gantt import build_rich_gantt
from .generator import PRESETS, generate_workload
from .metrics import summarize_process_metrics
from .models import ProcessDescriptor, ScheduleResult
from .report import comparison_rows, export_comparison
from .workload_io import load_workload, save_workload

logger = logging.getLogger(__name__)


def _add_workload_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--workload",
        "-w",
        help="Path to JSON or CSV workload file.",
    )
    source.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        help="Generate a random workload with this profile instead of reading a file.",
    )
    parser.add_argument(
        "--count",
        "-n",
        type=int,
        default=5,
        help="Number of processes to generate with --preset (default: 5).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed used with --preset.",
    )


def _add_policy_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}).",
    )
    parser.add_argument(
        "--arrived-weight-only",
        action="store_true",
        help="CFS: size timeslices using only processes that have already arrived.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, Priority, RR, MLFQ, CFS).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every dispatch decision.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run one scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        choices=list(ALGORITHMS),
        help="Algorithm to use.",
    )
    _add_workload_arguments(run_parser)
    _add_policy_arguments(run_parser)

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run all six algorithms on the same workload and compare them.",
    )
    _add_workload_arguments(compare_parser)
    _add_policy_arguments(compare_parser)
    compare_parser.add_argument(
        "--export",
        "-o",
        default=None,
        help="Also write the comparison as CSV to this path (a numbered name is used if it exists).",
    )

    generate_parser = subparsers.add_parser("generate", help="Write a random workload to a CSV file.")
    generate_parser.add_argument("output", help="Destination CSV path.")
    generate_parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default="default",
        help="Load profile (default: default).",
    )
    generate_parser.add_argument("--count", "-n", type=int, default=5, help="Number of processes (default: 5).")
    generate_parser.add_argument("--seed", type=int, default=None, help="Random seed.")

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _load_processes(args: argparse.Namespace) -> List[ProcessDescriptor]:
    if args.workload:
        return load_workload(Path(args.workload))
    return generate_workload(args.count, preset=args.preset, seed=args.seed)


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = ["PID", "Arrive", "Burst", "Priority", "Start", "Finish", "Wait", "Turnaround", "Response", "Switches"]

    proc_table = Table(title="Per-process results", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h == "PID" else "right")

    for p in result.processes:
        proc_table.add_row(
            p.pid,
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(p.start_time),
            str(p.finish_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
            str(p.num_times_switched),
        )

    console.print(proc_table)
    console.print()

    summary = summarize_process_metrics(result.processes)
    sys_table = Table(title="Summary", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Processes", str(len(result.processes)))
    sys_table.add_row("Avg waiting", f"{summary['avg_waiting']:.1f}")
    sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.1f}")
    sys_table.add_row("Avg response", f"{summary['avg_response']:.1f}")
    if result.system:
        sys_table.add_row("CPU utilization", f"{result.system.cpu_utilization:.1f}%")
        sys_table.add_row("Throughput (proc/time)", f"{result.system.throughput:.4f}")
    sys_table.add_row("Context switches", str(result.context_switches))
    sys_table.add_row("Distinct procs served / interval", f"{result.summary.average_processes_served:.4f}")
    sys_table.add_row("Interval size (sqrt of total burst)", str(result.summary.interval_size))

    console.print(sys_table)


def _print_comparison(results, console: Console) -> None:
    table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    table.add_column("Algorithm")
    for h in ["Avg waiting", "Avg turnaround", "Avg response", "CPU util %", "Throughput", "Switches", "Distinct/int", "Interval"]:
        table.add_column(h, justify="right")

    for row in comparison_rows(results):
        table.add_row(*row.as_csv_row())

    console.print(table)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    try:
        if args.command == "run":
            processes = _load_processes(args)
            result = run_algorithm(
                args.algorithm,
                processes,
                quantum=args.quantum,
                include_unarrived_weight=not args.arrived_weight_only,
            )
            _print_result(result, console)
            return 0

        if args.command == "compare":
            processes = _load_processes(args)
            results = run_all(
                processes,
                quantum=args.quantum,
                include_unarrived_weight=not args.arrived_weight_only,
            )
            _print_comparison(results, console)
            if args.export:
                written = export_comparison(results, args.export)
                console.print(f"[green]Comparison saved to {written}[/green]")
            return 0

        if args.command == "generate":
            processes = generate_workload(args.count, preset=args.preset, seed=args.seed)
            written = save_workload(processes, args.output)
            console.print(f"[green]Wrote {len(processes)} processes to {written}[/green]")
            return 0
    except (ValueError, OSError) as exc:
        logger.debug("command failed", exc_info=True)
        console.print(f"[red]Error: {exc}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
