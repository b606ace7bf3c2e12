from __future__ import annotations

from typing import Dict, List, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import GanttSegment

IDLE_STYLE = "on grey37"

_COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def _width(seg: GanttSegment) -> int:
    return max(1, int(round(seg.duration)))


def _mark(value) -> str:
    if isinstance(value, float) and not value.is_integer():
        return f"{value:>6.2f}"
    return f"{int(value):>3}"


def render_gantt(segments: Sequence[GanttSegment]) -> str:
    """
    Plain-text Gantt chart. Expects segments that already include idle
    intervals; idle time is drawn with dots.
    """
    if not segments:
        return "(no execution)"

    line = "|"
    labels = ""
    time_marks = "0"

    for seg in sorted(segments, key=lambda s: (s.start_time, s.end_time)):
        width = _width(seg)
        line += ("." if seg.is_idle else "=") * width
        labels += ("" if seg.is_idle else seg.pid[:width]).ljust(width)
        time_marks += _mark(seg.end_time)

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels,
            time_marks,
        ]
    )


def build_rich_gantt(segments: Sequence[GanttSegment]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not segments:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    pid_to_color: Dict[str, str] = {}

    def pid_style(seg: GanttSegment) -> str:
        if seg.is_idle:
            return IDLE_STYLE
        if seg.pid not in pid_to_color:
            pid_to_color[seg.pid] = _COLORS[len(pid_to_color) % len(_COLORS)]
        return f"on {pid_to_color[seg.pid]}"

    timeline = Text()
    labels = Text()
    marks: List[str] = ["0"]

    for seg in sorted(segments, key=lambda s: (s.start_time, s.end_time)):
        width = _width(seg)
        timeline.append(" " * width, style=pid_style(seg))
        labels.append(seg.pid[:width].ljust(width), style="dim" if seg.is_idle else "bold")
        marks.append(_mark(seg.end_time))

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, "".join(marks)
