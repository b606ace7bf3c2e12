from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass, replace
from typing import Callable, Deque, Dict, List, Optional, Sequence, Union

from .errors import InternalInvariantError, InvalidInputError
from .models import GanttSegment, Number, Policy, Process, ProcessMetrics, SimulationReport
from .registry import validate_processes
from .timeline import insert_idle_segments

logger = logging.getLogger(__name__)


@dataclass
class _RunState:
    """
    Working record for one process during a single run. The Process itself
    is never touched; only this copy's remaining time shrinks.
    """

    process: Process
    remaining_time: Number
    first_start: Optional[Number] = None
    completed: bool = False


def _arrival_order(processes: Sequence[Process]) -> List[Process]:
    # sorted() is stable, so equal arrivals keep their insertion order.
    return sorted(processes, key=lambda p: p.arrival_time)


def _check_bound(iterations: int, limit: int, algorithm: str) -> None:
    if iterations > limit:
        raise InternalInvariantError(
            f"{algorithm} exceeded {limit} scheduling steps; refusing to loop forever"
        )


# ---------------------------------------------------------------------------
# Non-preemptive selection (FCFS, SJF, LJF, Priority)
# ---------------------------------------------------------------------------


def _run_non_preemptive(
    processes: Sequence[Process],
    policy: Policy,
    key: Callable[[Process], object],
) -> SimulationReport:
    """
    Repeatedly run, to completion, the ready process with the smallest
    ``key``. Ties go to the earliest process in arrival order (then
    insertion order). When nothing is ready, time jumps to the next arrival.
    """
    states = [_RunState(process=p, remaining_time=p.burst_time) for p in _arrival_order(processes)]

    time: Number = 0
    timeline: List[GanttSegment] = []
    metrics: List[ProcessMetrics] = []
    done = 0

    # Each pass either completes a process or jumps to an arrival.
    limit = 2 * len(states) + 1
    iterations = 0

    while done < len(states):
        iterations += 1
        _check_bound(iterations, limit, policy.display_name)

        ready = [i for i, st in enumerate(states) if not st.completed and st.process.arrival_time <= time]

        if not ready:
            time = min(st.process.arrival_time for st in states if not st.completed)
            logger.debug("%s: CPU idle, jumping to t=%s", policy.value, time)
            continue

        idx = min(ready, key=lambda i: (key(states[i].process), i))
        st = states[idx]
        p = st.process

        start_time = time
        end_time = start_time + p.burst_time
        logger.debug("%s: t=%s dispatch %s until %s", policy.value, start_time, p.pid, end_time)

        timeline.append(GanttSegment(pid=p.pid, start_time=start_time, end_time=end_time))
        # Runs to completion on first dispatch, so response time equals waiting time.
        metrics.append(ProcessMetrics.for_completion(p, start_time=start_time, completion_time=end_time))

        st.first_start = start_time
        st.remaining_time = 0
        st.completed = True
        done += 1
        time = end_time

    return SimulationReport(
        algorithm=policy.display_name,
        policy=policy,
        process_metrics=metrics,
        segments=timeline,
    )


def _priority_key(p: Process):
    # A missing priority sorts after every real one.
    return (p.priority is None, p.priority if p.priority is not None else 0)


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[Number] = None) -> SimulationReport:
    """
    First-Come First-Serve (non-preemptive) scheduling.
    """
    return _run_non_preemptive(processes, Policy.FCFS, key=lambda p: p.arrival_time)


def schedule_sjf(processes: Sequence[Process], quantum: Optional[Number] = None) -> SimulationReport:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time.
    """
    return _run_non_preemptive(processes, Policy.SJF, key=lambda p: p.burst_time)


def schedule_ljf(processes: Sequence[Process], quantum: Optional[Number] = None) -> SimulationReport:
    """
    Longest Job First (non-preemptive): the ready process with the largest
    burst time runs next.
    """
    return _run_non_preemptive(processes, Policy.LJF, key=lambda p: -p.burst_time)


def schedule_priority(processes: Sequence[Process], quantum: Optional[Number] = None) -> SimulationReport:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. Processes without a
    priority run after all prioritized ones; ties go to the earlier arrival.
    """
    return _run_non_preemptive(processes, Policy.PRIORITY, key=_priority_key)


# ---------------------------------------------------------------------------
# Preemptive unit stepping (SRTF, LRTF)
# ---------------------------------------------------------------------------


def _run_unit_stepper(
    processes: Sequence[Process],
    policy: Policy,
    key: Callable[[_RunState], object],
) -> SimulationReport:
    """
    Advance time one unit at a time, running the eligible process with the
    smallest ``key`` for each unit. Consecutive units of the same process are
    merged into a single segment.
    """
    states = [_RunState(process=p, remaining_time=p.burst_time) for p in _arrival_order(processes)]

    time: Number = 0
    timeline: List[GanttSegment] = []
    metrics: List[ProcessMetrics] = []
    done = 0

    # One pass per unit of work plus at most one idle jump per process.
    limit = int(sum(math.ceil(st.remaining_time) for st in states)) + len(states) + 1
    iterations = 0

    while done < len(states):
        iterations += 1
        _check_bound(iterations, limit, policy.display_name)

        ready = [st for st in states if st.remaining_time > 0 and st.process.arrival_time <= time]

        if not ready:
            time = min(st.process.arrival_time for st in states if st.remaining_time > 0)
            logger.debug("%s: CPU idle, jumping to t=%s", policy.value, time)
            continue

        st = min(ready, key=key)
        pid = st.process.pid
        if st.first_start is None:
            st.first_start = time

        start_time = time
        time = start_time + 1
        st.remaining_time -= 1

        last = timeline[-1] if timeline else None
        if last is not None and last.pid == pid and last.end_time == start_time:
            timeline[-1] = replace(last, end_time=time)
        else:
            if last is not None:
                logger.debug("%s: t=%s switch %s -> %s", policy.value, start_time, last.pid, pid)
            timeline.append(GanttSegment(pid=pid, start_time=start_time, end_time=time))

        if st.remaining_time <= 0:
            st.completed = True
            done += 1
            metrics.append(ProcessMetrics.for_completion(st.process, start_time=st.first_start, completion_time=time))

    return SimulationReport(
        algorithm=policy.display_name,
        policy=policy,
        process_metrics=metrics,
        segments=timeline,
    )


def schedule_srtf(processes: Sequence[Process], quantum: Optional[Number] = None) -> SimulationReport:
    """
    Shortest Remaining Time First (preemptive SJF).

    Ties on remaining time go to the earlier arrival, then the smaller PID.
    """
    return _run_unit_stepper(
        processes,
        Policy.SRTF,
        key=lambda st: (st.remaining_time, st.process.arrival_time, st.process.pid),
    )


def schedule_lrtf(processes: Sequence[Process], quantum: Optional[Number] = None) -> SimulationReport:
    """
    Longest Remaining Time First (preemptive LJF).
    """
    return _run_unit_stepper(
        processes,
        Policy.LRTF,
        key=lambda st: (-st.remaining_time, st.process.arrival_time, st.process.pid),
    )


# ---------------------------------------------------------------------------
# Round Robin
# ---------------------------------------------------------------------------


def _fill_missing_metrics(
    states: Sequence[_RunState],
    results: Dict[str, ProcessMetrics],
    time: Number,
) -> None:
    """
    Make sure every process has a metrics record. Anything the rotation never
    finished is closed at ``time``; a process that never ran reports a
    response time of 0.
    """
    for st in states:
        p = st.process
        if p.pid in results:
            continue
        logger.warning("Round Robin: %s never completed; closing it at t=%s", p.pid, time)
        start_time = st.first_start if st.first_start is not None else p.arrival_time
        results[p.pid] = ProcessMetrics.for_completion(p, start_time=start_time, completion_time=time)


def schedule_rr(processes: Sequence[Process], quantum: Optional[Number] = None) -> SimulationReport:
    """
    Round Robin scheduling with a fixed time quantum.

    The ready queue starts with every process arriving at time 0. After each
    slice, processes that arrived during it are queued *before* the process
    that was just preempted.
    """
    if quantum is None or quantum <= 0:
        raise InvalidInputError("Round Robin requires a positive time quantum")

    ordered = _arrival_order(processes)
    states = [_RunState(process=p, remaining_time=p.burst_time) for p in ordered]
    n = len(states)

    queue: Deque[int] = deque()
    next_arrival = 0
    while next_arrival < n and ordered[next_arrival].arrival_time <= 0:
        if ordered[next_arrival].arrival_time == 0:
            queue.append(next_arrival)
        next_arrival += 1

    time: Number = 0
    timeline: List[GanttSegment] = []
    results: Dict[str, ProcessMetrics] = {}

    limit = sum(math.ceil(st.remaining_time / quantum) + 1 for st in states) + n + 1
    iterations = 0

    while queue or next_arrival < n:
        iterations += 1
        _check_bound(iterations, limit, Policy.RR.display_name)

        if not queue:
            # Nothing ready: jump to the next arrival and queue everyone arriving then.
            time = ordered[next_arrival].arrival_time
            logger.debug("rr: CPU idle, jumping to t=%s", time)
            while next_arrival < n and ordered[next_arrival].arrival_time == time:
                queue.append(next_arrival)
                next_arrival += 1
            continue

        idx = queue.popleft()
        st = states[idx]
        p = st.process

        if st.first_start is None:
            st.first_start = time

        run_time = min(quantum, st.remaining_time)
        slice_start = time
        slice_end = time + run_time
        timeline.append(GanttSegment(pid=p.pid, start_time=slice_start, end_time=slice_end))
        logger.debug("rr: t=%s run %s for %s", slice_start, p.pid, run_time)

        time = slice_end
        st.remaining_time -= run_time

        # New arrivals go ahead of the process we just preempted.
        while next_arrival < n and ordered[next_arrival].arrival_time <= time:
            queue.append(next_arrival)
            next_arrival += 1

        if st.remaining_time > 0:
            queue.append(idx)
        else:
            st.completed = True
            results[p.pid] = ProcessMetrics.for_completion(p, start_time=st.first_start, completion_time=time)

    _fill_missing_metrics(states, results, time)

    return SimulationReport(
        algorithm=Policy.RR.display_name,
        policy=Policy.RR,
        quantum=quantum,
        process_metrics=list(results.values()),
        segments=timeline,
    )


ALGORITHMS = {
    Policy.FCFS.value: schedule_fcfs,
    Policy.SJF.value: schedule_sjf,
    Policy.RR.value: schedule_rr,
    Policy.LJF.value: schedule_ljf,
    Policy.PRIORITY.value: schedule_priority,
    Policy.SRTF.value: schedule_srtf,
    Policy.LRTF.value: schedule_lrtf,
}


def simulate(
    processes: Sequence[Process],
    policy: Union[str, Policy],
    quantum: Optional[Number] = None,
) -> SimulationReport:
    """
    Validate ``processes`` for ``policy``, run it, and fill idle gaps in the
    resulting timeline. Nothing is returned unless the whole run succeeds.
    """
    policy = Policy.parse(policy)
    snapshot = tuple(processes)
    validate_processes(snapshot, policy, quantum)

    func = ALGORITHMS[policy.value]
    raw = func(snapshot, quantum=quantum if policy is Policy.RR else None)
    return replace(raw, segments=insert_idle_segments(raw.segments))


def run_algorithm(name: str, processes: Sequence[Process], quantum: Optional[Number] = None) -> SimulationReport:
    """
    Dispatch to the requested algorithm by name (``fcfs``, ``sjf``, ``rr``,
    ``ljf``, ``priority``, ``srtf``, ``lrtf``).
    """
    return simulate(processes, name, quantum=quantum)
