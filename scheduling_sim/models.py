from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from .config import IDLE_LABEL
from .errors import InvalidInputError

Number = Union[int, float]

IDLE = IDLE_LABEL


class Policy(str, Enum):
    FCFS = "fcfs"
    SJF = "sjf"
    RR = "rr"
    LJF = "ljf"
    PRIORITY = "priority"
    SRTF = "srtf"
    LRTF = "lrtf"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, name: Union[str, "Policy"]) -> "Policy":
        """
        Resolve a policy from its short name. ``rrs`` is accepted as an alias
        for Round Robin.
        """
        if isinstance(name, Policy):
            return name
        key = str(name).strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise InvalidInputError(f"Unknown algorithm '{name}' (choose from: {choices})") from None


_DISPLAY_NAMES = {
    Policy.FCFS: "FCFS",
    Policy.SJF: "SJF (non-preemptive)",
    Policy.RR: "Round Robin",
    Policy.LJF: "LJF (non-preemptive)",
    Policy.PRIORITY: "Priority (non-preemptive)",
    Policy.SRTF: "SRTF",
    Policy.LRTF: "LRTF",
}

_ALIASES = {"rrs": "rr", "round-robin": "rr", "round_robin": "rr"}


@dataclass(frozen=True)
class Process:
    pid: str
    arrival_time: Number
    burst_time: Number
    priority: Optional[Number] = None


@dataclass(frozen=True)
class GanttSegment:
    """
    One contiguous interval of CPU occupancy, by a process or by ``IDLE``.
    """

    pid: str
    start_time: Number
    end_time: Number

    @property
    def duration(self) -> Number:
        return self.end_time - self.start_time

    @property
    def is_idle(self) -> bool:
        return self.pid == IDLE


@dataclass(frozen=True)
class ProcessMetrics:
    pid: str
    arrival_time: Number
    burst_time: Number
    start_time: Number
    completion_time: Number
    waiting_time: Number
    turnaround_time: Number
    response_time: Number
    priority: Optional[Number] = None

    @classmethod
    def for_completion(cls, process: Process, start_time: Number, completion_time: Number) -> "ProcessMetrics":
        """
        Derive TAT/WT/RT from the first start and completion of ``process``.
        """
        turnaround_time = completion_time - process.arrival_time
        return cls(
            pid=process.pid,
            arrival_time=process.arrival_time,
            burst_time=process.burst_time,
            start_time=start_time,
            completion_time=completion_time,
            waiting_time=turnaround_time - process.burst_time,
            turnaround_time=turnaround_time,
            response_time=start_time - process.arrival_time,
            priority=process.priority,
        )


@dataclass
class SimulationReport:
    algorithm: str
    policy: Policy
    quantum: Optional[Number] = None
    process_metrics: List[ProcessMetrics] = field(default_factory=list)
    segments: List[GanttSegment] = field(default_factory=list)

    @property
    def makespan(self) -> Number:
        if not self.process_metrics:
            return 0
        return max(m.completion_time for m in self.process_metrics)

    def metrics_for(self, pid: str) -> ProcessMetrics:
        for m in self.process_metrics:
            if m.pid == pid:
                return m
        raise KeyError(pid)
