from __future__ import annotations

from itertools import cycle
from typing import Dict, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

CELL_WIDTH = 8

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def render_title(title: str) -> str:
    """
    Dash banner with the title roughly centred underneath the top rule.
    """
    rule = "-" * (len(title) * 2)
    return "\n".join([rule, " " * (len(title) // 2) + " " + title, rule])


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart: one fixed-width cell per slice, in the order
    given, followed by the start time of every slice and the final stop.
    """
    if not slices:
        return "Gantt schedule\n(no execution)"

    bar = "|"
    for sl in slices:
        pid = str(sl.pid)
        padding = " " * ((CELL_WIDTH - len(pid)) // 2)
        bar += padding + pid + padding + "|"

    time_marks = "".join(f"{sl.start_time}\t" for sl in slices) + str(slices[-1].end_time)

    return "\n".join(["Gantt schedule", bar, time_marks])


def _time_marks(slices: List[ScheduledSlice]) -> str:
    """
    Time labels placed at the column of the instant they mark, one column per
    time unit. A label that would touch the previous one is dropped.
    """
    instants = {0} | {sl.start_time for sl in slices} | {sl.end_time for sl in slices}
    marks = ""
    for t in sorted(instants):
        if marks and len(marks) >= t:
            continue
        marks = marks.ljust(t) + str(t)
    return marks


def build_rich_gantt(slices: List[ScheduledSlice]) -> Panel:
    """
    Colored Gantt panel, one column per time unit, with time marks underneath.

    Idle stretches are left blank; each process keeps one color across all of
    its slices.
    """
    if not slices:
        return Panel("No execution", title="Gantt Chart")

    slices = sorted(slices, key=lambda s: (s.start_time, s.end_time))
    palette = cycle(COLORS)
    colors: Dict[int, str] = {}

    bar = Text()
    labels = Text()
    clock = 0
    for sl in slices:
        if sl.start_time > clock:
            bar.append(" " * (sl.start_time - clock))
            labels.append(" " * (sl.start_time - clock))

        if sl.pid not in colors:
            colors[sl.pid] = next(palette)
        color = colors[sl.pid]
        bar.append(" " * sl.duration, style=f"on {color}")
        labels.append(str(sl.pid)[: sl.duration].center(sl.duration), style=f"bold {color}")
        clock = sl.end_time

    grid = Table.grid(padding=(0, 0))
    grid.add_row(bar)
    grid.add_row(labels)
    grid.add_row(Text(_time_marks(slices), style="dim"))

    return Panel.fit(grid, title="Gantt Chart")
