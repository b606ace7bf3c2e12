from __future__ import annotations

from typing import Iterable, List

from .models import IDLE, GanttSegment


def insert_idle_segments(segments: Iterable[GanttSegment]) -> List[GanttSegment]:
    """
    Return the segments sorted by start time with an ``Idle`` segment filling
    every gap, starting from time 0.

    Applying this to its own output returns an equal list.
    """
    ordered = sorted(segments, key=lambda s: (s.start_time, s.end_time))

    result: List[GanttSegment] = []
    current_time = 0
    for seg in ordered:
        if seg.start_time > current_time:
            result.append(GanttSegment(pid=IDLE, start_time=current_time, end_time=seg.start_time))
        result.append(seg)
        current_time = max(current_time, seg.end_time)

    return result
