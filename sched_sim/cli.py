from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import ALGORITHMS, DEFAULT_QUANTUM, run_algorithm
from .errors import SchedulerError
from .gantt import build_rich_gantt, render_gantt, render_title
from .models import ScheduleResult
from .workload_io import load_workload

logger = logging.getLogger("sched_sim")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sched-sim",
        description="CPU scheduling simulator (FCFS, SJF, Priority, Round-robin).",
    )
    parser.add_argument(
        "workload",
        help="Path to a CSV (id,burst,arrival[,priority]) or JSON workload file.",
    )
    parser.add_argument(
        "--algorithm",
        "-a",
        dest="algorithms",
        action="append",
        choices=list(ALGORITHMS),
        help="Algorithm to run; repeat to run several (default: all, in order fcfs sjf priority rr).",
    )
    parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}).",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Print the Gantt chart as plain text instead of a colored panel.",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Print one comparison table of average metrics instead of per-algorithm output.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every dispatch decision.",
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _print_result(result: ScheduleResult, console: Console, plain: bool = False) -> None:
    console.print(render_title(result.algorithm), markup=False, highlight=False)
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    if plain:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)
    else:
        console.print(build_rich_gantt(result.timeline))

    console.print()

    summary = result.summary
    footers = {
        "Wait": f"Average\n{summary.average_waiting_time:.2f}",
        "Turnaround": f"Average\n{summary.average_turnaround_time:.2f}",
        "Exit": f"Throughput\n{summary.throughput:.2f}/t",
    }

    table = Table(title="Schedule table", box=box.SIMPLE_HEAVY, show_footer=True)
    for h in ["ID", "Priority", "Burst", "Arrival", "Wait", "Turnaround", "Exit"]:
        justify = "center" if h in {"ID", "Priority"} else "right"
        table.add_column(h, justify=justify, footer=footers.get(h, ""))

    for p in result.processes:
        table.add_row(
            str(p.pid),
            str(p.priority),
            str(p.burst_time),
            str(p.arrival_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.completion_time),
        )

    console.print(table)
    console.print()


def _print_compare(results: List[ScheduleResult], workload_path: Path, console: Console) -> None:
    table = Table(title=f"Algorithm comparison: {workload_path}", box=box.SIMPLE_HEAVY)
    table.add_column("Algorithm")
    table.add_column("Quantum", justify="right")
    table.add_column("Avg waiting", justify="right")
    table.add_column("Avg turnaround", justify="right")
    table.add_column("Throughput", justify="right")

    for result in results:
        table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{result.summary.average_waiting_time:.2f}",
            f"{result.summary.average_turnaround_time:.2f}",
            f"{result.summary.throughput:.3f}",
        )

    console.print(table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    console = Console()

    workload_path = Path(args.workload)
    names = args.algorithms or list(ALGORITHMS)

    try:
        processes = load_workload(workload_path)
        results = [
            run_algorithm(name, processes, quantum=args.quantum if name == "rr" else None)
            for name in names
        ]
    except SchedulerError as exc:
        logger.error("%s", exc)
        return 1

    if args.compare:
        _print_compare(results, workload_path, console)
        return 0

    for result in results:
        _print_result(result, console, plain=args.plain)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
