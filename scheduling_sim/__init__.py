"""
CPU scheduling simulator.

Computes the Gantt timeline and per-process metrics of classical CPU
scheduling policies (FCFS, SJF, RR, LJF, Priority, SRTF, LRTF) and the
statistics derived from them.
"""

from .algorithms import run_algorithm, simulate
from .errors import DegenerateMetricError, InternalInvariantError, InvalidInputError, SchedulingError
from .metrics import compute_statistics
from .models import IDLE, GanttSegment, Policy, Process, ProcessMetrics, SimulationReport
from .registry import ProcessRegistry
from .timeline import insert_idle_segments

__all__ = [
    "IDLE",
    "DegenerateMetricError",
    "GanttSegment",
    "InternalInvariantError",
    "InvalidInputError",
    "Policy",
    "Process",
    "ProcessMetrics",
    "ProcessRegistry",
    "SchedulingError",
    "SimulationReport",
    "compute_statistics",
    "insert_idle_segments",
    "run_algorithm",
    "simulate",
]
