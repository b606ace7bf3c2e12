from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, run_algorithm
from .config import Settings, get_settings
from .errors import SchedulingError
from .gantt import build_rich_gantt, render_gantt
from .logging_setup import configure_logging
from .metrics import DescriptiveStats, SimulationStatistics, compute_statistics
from .models import Policy, SimulationReport
from .workload_io import load_workload

logger = logging.getLogger(__name__)

ALL_ALGORITHMS = list(ALGORITHMS.keys())


def _number(text: str):
    try:
        return int(text)
    except ValueError:
        return float(text)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scheduling-sim",
        description="CPU scheduling simulator (FCFS, SJF, RR, LJF, Priority, SRTF, LRTF).",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help=f"Logging verbosity (default: {settings.log_level}).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALL_ALGORITHMS)}).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=_number,
        default=settings.quantum,
        help=f"Time quantum for round-robin (ignored by other algorithms, default: {settings.quantum}).",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print a plain-text Gantt chart instead of the colored one.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare aggregate metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=ALL_ALGORITHMS,
        help=f"Algorithms to compare (default: {' '.join(ALL_ALGORITHMS)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=_number,
        default=settings.quantum,
        help=f"Time quantum used for RR when included (default: {settings.quantum}).",
    )

    stats_parser = subparsers.add_parser(
        "stats",
        help="Show descriptive statistics of one algorithm run.",
    )
    stats_parser.add_argument("--algorithm", "-a", required=True, help="Algorithm to use.")
    stats_parser.add_argument("--workload", "-w", required=True, help="Path to JSON or CSV workload file.")
    stats_parser.add_argument(
        "--quantum",
        "-q",
        type=_number,
        default=settings.quantum,
        help="Time quantum for round-robin.",
    )

    return parser


def _fmt(value, decimals: int) -> str:
    if value is None:
        return "n/a"
    return f"{value:.{decimals}f}"


def _quantum_for(name: str, quantum: float) -> Optional[float]:
    return quantum if Policy.parse(name) is Policy.RR else None


def _stats_table(stats: SimulationStatistics, decimals: int) -> Table:
    table = Table(title="Statistical summary", box=box.SIMPLE_HEAVY)
    table.add_column("Metric")
    for col in ("Min", "Max", "Median", "Mean", "Std dev", "Total"):
        table.add_column(col, justify="right")

    def add(label: str, d: DescriptiveStats) -> None:
        table.add_row(
            label,
            *(_fmt(v, decimals) for v in (d.minimum, d.maximum, d.median, d.mean, d.stddev, d.total)),
        )

    add("Waiting", stats.waiting)
    add("Turnaround", stats.turnaround)
    add("Burst", stats.burst)
    return table


def _print_result(console: Console, result: SimulationReport, decimals: int, plain: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if plain:
        console.print(render_gantt(result.segments), markup=False, highlight=False)
    else:
        panel, time_marks = build_rich_gantt(result.segments)
        console.print(panel)
        if time_marks:
            console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Start",
        "Complete",
        "Turnaround",
        "Wait",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in sorted(result.process_metrics, key=lambda m: m.pid):
        proc_table.add_row(
            p.pid,
            str(p.arrival_time),
            str(p.burst_time),
            "-" if p.priority is None else str(p.priority),
            _fmt(p.start_time, decimals),
            _fmt(p.completion_time, decimals),
            _fmt(p.turnaround_time, decimals),
            _fmt(p.waiting_time, decimals),
            _fmt(p.response_time, decimals),
        )

    console.print(proc_table)
    console.print()

    stats = compute_statistics(result)
    avg = stats.averages

    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg completion", _fmt(avg.avg_completion, decimals))
    sys_table.add_row("Avg turnaround", _fmt(avg.avg_turnaround, decimals))
    sys_table.add_row("Avg waiting", _fmt(avg.avg_waiting, decimals))
    sys_table.add_row("Avg response", _fmt(avg.avg_response, decimals))
    sys_table.add_row("Makespan", _fmt(stats.makespan, decimals))
    sys_table.add_row("Idle time", _fmt(stats.idle_time, decimals))
    util = stats.cpu_utilization
    sys_table.add_row("CPU utilization", "n/a" if util is None else f"{util:.1f}%")
    sys_table.add_row("Throughput (proc/time)", _fmt(stats.throughput, 4))
    sys_table.add_row("Avg response ratio", _fmt(stats.avg_response_ratio, decimals))
    sys_table.add_row("Context switches", str(stats.context_switches))

    console.print(sys_table)
    console.print()
    console.print(_stats_table(stats, decimals))


def _compare_table(workload_path: Path, algorithms: List[str], quantum: float, decimals: int) -> Table:
    processes = load_workload(workload_path)

    summary_table = Table(title=f"Algorithm comparison: {workload_path}", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("CPU util %", justify="right")
    summary_table.add_column("Throughput", justify="right")
    summary_table.add_column("Switches", justify="right")

    for alg in algorithms:
        result = run_algorithm(alg, processes, quantum=_quantum_for(alg, quantum))
        stats = compute_statistics(result)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            _fmt(stats.averages.avg_waiting, decimals),
            _fmt(stats.averages.avg_turnaround, decimals),
            _fmt(stats.averages.avg_response, decimals),
            _fmt(stats.cpu_utilization, 1),
            _fmt(stats.throughput, 4),
            str(stats.context_switches),
        )

    return summary_table


def main(argv: Optional[List[str]] = None) -> int:
    console = Console()
    try:
        settings = get_settings()
    except SchedulingError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser = build_parser(settings)
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        if args.command == "run":
            processes = load_workload(Path(args.workload))
            result = run_algorithm(args.algorithm, processes, quantum=_quantum_for(args.algorithm, args.quantum))
            _print_result(console, result, settings.decimals, plain=args.plain)
            return 0

        if args.command == "compare":
            table = _compare_table(Path(args.workload), args.algorithms, args.quantum, settings.decimals)
            console.print(table)
            return 0

        if args.command == "stats":
            processes = load_workload(Path(args.workload))
            result = run_algorithm(args.algorithm, processes, quantum=_quantum_for(args.algorithm, args.quantum))
            console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
            console.print(_stats_table(compute_statistics(result), settings.decimals))
            return 0
    except (SchedulingError, OSError) as exc:
        logger.debug("Command failed", exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
