from __future__ import annotations

import math
import numbers
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import InvalidInputError
from .models import Policy, Process


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def validate_process(process: Process) -> None:
    """
    Check a single process record: non-empty id, finite non-negative arrival,
    finite positive burst, numeric (or absent) priority.
    """
    if not isinstance(process.pid, str) or not process.pid.strip():
        raise InvalidInputError("Process ID is required")
    if not _is_number(process.arrival_time) or process.arrival_time < 0:
        raise InvalidInputError(f"{process.pid}: arrival time must be a non-negative number")
    if not _is_number(process.burst_time) or process.burst_time <= 0:
        raise InvalidInputError(f"{process.pid}: burst time must be a positive number")
    if process.priority is not None and not _is_number(process.priority):
        raise InvalidInputError(f"{process.pid}: priority must be numeric")


def validate_processes(
    processes: Sequence[Process],
    policy: Policy,
    quantum: Optional[float] = None,
) -> None:
    """
    Reject a process set before simulating it under ``policy``.

    Raises InvalidInputError for an empty set, a bad record, a duplicate id,
    a missing or non-positive Round Robin quantum, a Priority run in which no
    process carries a priority, or a fractional burst under SRTF/LRTF (those
    step in whole time units).
    """
    if not processes:
        raise InvalidInputError("Please add at least one process")

    seen = set()
    for p in processes:
        validate_process(p)
        if p.pid in seen:
            raise InvalidInputError(f"Process ID already exists: {p.pid}")
        seen.add(p.pid)

    if policy is Policy.RR:
        if quantum is None or not _is_number(quantum) or quantum <= 0:
            raise InvalidInputError("Round Robin requires a positive time quantum")

    if policy is Policy.PRIORITY and all(p.priority is None for p in processes):
        raise InvalidInputError("Priority is required for Priority Scheduling")

    if policy in (Policy.SRTF, Policy.LRTF):
        for p in processes:
            if float(p.burst_time) != int(p.burst_time):
                raise InvalidInputError(
                    f"{p.pid}: {policy.display_name} steps in whole time units; burst time {p.burst_time} is fractional"
                )


class ProcessRegistry:
    """
    The caller-owned list of processes. Simulations only ever see a
    ``snapshot()`` of it.
    """

    def __init__(self) -> None:
        self._processes: List[Process] = []

    @classmethod
    def from_processes(cls, processes: Iterable[Process]) -> "ProcessRegistry":
        registry = cls()
        for p in processes:
            registry.add(p)
        return registry

    def add(self, process: Process) -> None:
        validate_process(process)
        if process.pid in self:
            raise InvalidInputError(f"Process ID already exists: {process.pid}")
        self._processes.append(process)

    def delete(self, pid: str) -> Process:
        for idx, p in enumerate(self._processes):
            if p.pid == pid:
                return self._processes.pop(idx)
        raise KeyError(pid)

    def clear(self) -> None:
        self._processes.clear()

    def snapshot(self) -> Tuple[Process, ...]:
        return tuple(self._processes)

    def __contains__(self, pid: object) -> bool:
        return any(p.pid == pid for p in self._processes)

    def __iter__(self) -> Iterator[Process]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._processes)
