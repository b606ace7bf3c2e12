from __future__ import annotations

import logging
import statistics
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .errors import DegenerateMetricError
from .models import GanttSegment, Number, ProcessMetrics, SimulationReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AverageMetrics:
    avg_completion: float
    avg_turnaround: float
    avg_waiting: float
    avg_response: float


@dataclass(frozen=True)
class DescriptiveStats:
    minimum: float
    maximum: float
    median: float
    mean: float
    stddev: float
    total: float


@dataclass(frozen=True)
class SimulationStatistics:
    """
    Everything derived from one report. ``cpu_utilization`` and
    ``throughput`` are None when the makespan is zero.
    """

    algorithm: str
    process_count: int
    averages: AverageMetrics
    waiting: DescriptiveStats
    turnaround: DescriptiveStats
    burst: DescriptiveStats
    makespan: Number
    busy_time: Number
    idle_time: Number
    cpu_utilization: Optional[float]
    throughput: Optional[float]
    avg_response_ratio: float
    context_switches: int


def _require_processes(processes: Sequence[ProcessMetrics]) -> None:
    if not processes:
        raise DegenerateMetricError("No process metrics to summarize")


def average_metrics(processes: Sequence[ProcessMetrics]) -> AverageMetrics:
    """
    Mean completion, turnaround, waiting and response time.
    """
    _require_processes(processes)
    n = len(processes)
    return AverageMetrics(
        avg_completion=sum(p.completion_time for p in processes) / n,
        avg_turnaround=sum(p.turnaround_time for p in processes) / n,
        avg_waiting=sum(p.waiting_time for p in processes) / n,
        avg_response=sum(p.response_time for p in processes) / n,
    )


def describe(values: Iterable[Number]) -> DescriptiveStats:
    """
    Min, max, median, mean and population standard deviation of ``values``.

    The median of an even-length sequence is the mean of the two middle
    values.
    """
    data: List[Number] = list(values)
    if not data:
        raise DegenerateMetricError("Cannot describe an empty sequence")

    return DescriptiveStats(
        minimum=min(data),
        maximum=max(data),
        median=statistics.median(data),
        mean=statistics.fmean(data),
        stddev=statistics.pstdev(data),
        total=sum(data),
    )


def makespan(processes: Sequence[ProcessMetrics]) -> Number:
    _require_processes(processes)
    return max(p.completion_time for p in processes)


def cpu_utilization(processes: Sequence[ProcessMetrics]) -> float:
    """
    Busy time (sum of bursts) as a percentage of the makespan.
    """
    span = makespan(processes)
    if span <= 0:
        raise DegenerateMetricError("CPU utilization is undefined for a zero-length timeline")
    return sum(p.burst_time for p in processes) / span * 100


def throughput(processes: Sequence[ProcessMetrics]) -> float:
    span = makespan(processes)
    if span <= 0:
        raise DegenerateMetricError("Throughput is undefined for a zero-length timeline")
    return len(processes) / span


def idle_time(processes: Sequence[ProcessMetrics]) -> Number:
    return makespan(processes) - sum(p.burst_time for p in processes)


def average_response_ratio(processes: Sequence[ProcessMetrics]) -> float:
    """
    Mean of turnaround / burst over all processes.
    """
    _require_processes(processes)
    return sum(p.turnaround_time / p.burst_time for p in processes) / len(processes)


def count_context_switches(segments: Iterable[GanttSegment]) -> int:
    """
    Count transitions between different processes in start order. Idle
    segments are skipped, so A, Idle, A is not a switch but A, Idle, B is.
    """
    switches = 0
    last_pid: Optional[str] = None
    for seg in sorted(segments, key=lambda s: s.start_time):
        if seg.is_idle:
            continue
        if last_pid is not None and seg.pid != last_pid:
            switches += 1
        last_pid = seg.pid
    return switches


def compute_statistics(report: SimulationReport) -> SimulationStatistics:
    """
    Derive the full set of aggregate metrics for a finished report.
    """
    processes = report.process_metrics
    _require_processes(processes)

    try:
        utilization: Optional[float] = cpu_utilization(processes)
        tput: Optional[float] = throughput(processes)
    except DegenerateMetricError as exc:
        logger.warning("%s: %s", report.algorithm, exc)
        utilization = None
        tput = None

    return SimulationStatistics(
        algorithm=report.algorithm,
        process_count=len(processes),
        averages=average_metrics(processes),
        waiting=describe(p.waiting_time for p in processes),
        turnaround=describe(p.turnaround_time for p in processes),
        burst=describe(p.burst_time for p in processes),
        makespan=makespan(processes),
        busy_time=sum(p.burst_time for p in processes),
        idle_time=idle_time(processes),
        cpu_utilization=utilization,
        throughput=tput,
        avg_response_ratio=average_response_ratio(processes),
        context_switches=count_context_switches(report.segments),
    )
