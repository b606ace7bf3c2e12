from scheduling_sim.algorithms import schedule_rr, schedule_srtf
from scheduling_sim.models import IDLE, GanttSegment, Process
from scheduling_sim.timeline import insert_idle_segments


def _spans(segments):
    return [(s.pid, s.start_time, s.end_time) for s in segments]


def test_leading_and_inner_gaps_become_idle():
    segs = [
        GanttSegment("B", 6, 8),
        GanttSegment("A", 2, 4),
    ]
    out = insert_idle_segments(segs)
    assert _spans(out) == [(IDLE, 0, 2), ("A", 2, 4), (IDLE, 4, 6), ("B", 6, 8)]


def test_contiguous_timeline_unchanged():
    segs = [GanttSegment("A", 0, 3), GanttSegment("B", 3, 5)]
    assert insert_idle_segments(segs) == segs


def test_empty_timeline():
    assert insert_idle_segments([]) == []


def test_idempotent():
    segs = [GanttSegment("A", 1, 2), GanttSegment("B", 5, 7), GanttSegment("C", 7, 9)]
    once = insert_idle_segments(segs)
    assert insert_idle_segments(once) == once


def test_does_not_mutate_input():
    segs = [GanttSegment("B", 4, 5), GanttSegment("A", 1, 2)]
    insert_idle_segments(segs)
    assert _spans(segs) == [("B", 4, 5), ("A", 1, 2)]


def test_tiles_policy_output_up_to_makespan():
    procs = [
        Process("A", arrival_time=1, burst_time=3),
        Process("B", arrival_time=9, burst_time=2),
        Process("C", arrival_time=10, burst_time=1),
    ]
    for report in (schedule_rr(procs, quantum=2), schedule_srtf(procs)):
        out = insert_idle_segments(report.segments)
        assert out[0].start_time == 0
        for prev, nxt in zip(out, out[1:]):
            assert prev.end_time == nxt.start_time
        assert out[-1].end_time == report.makespan
        assert sum(s.duration for s in out) == report.makespan
