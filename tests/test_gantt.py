from rich.panel import Panel

from scheduling_sim.gantt import build_rich_gantt, render_gantt
from scheduling_sim.models import IDLE, GanttSegment


def test_render_gantt_draws_idle_as_dots():
    segs = [GanttSegment(IDLE, 0, 2), GanttSegment("A", 2, 5)]
    lines = render_gantt(segs).splitlines()
    assert lines[0] == "Gantt Chart:"
    assert lines[1] == "|..===|"
    assert lines[2] == "  A  "
    assert lines[3] == "0  2  5"


def test_render_gantt_empty():
    assert render_gantt([]) == "(no execution)"


def test_build_rich_gantt_time_marks():
    segs = [GanttSegment("A", 0, 1), GanttSegment(IDLE, 1, 3), GanttSegment("B", 3, 4)]
    panel, marks = build_rich_gantt(segs)
    assert isinstance(panel, Panel)
    assert marks == "0  1  3  4"


def test_build_rich_gantt_empty():
    panel, marks = build_rich_gantt([])
    assert marks == ""
