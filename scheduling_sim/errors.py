"""
Exceptions raised by the simulator.

Everything derives from ``SchedulingError`` so callers can catch the whole
family at once; each kind also subclasses the matching builtin so code that
expects a ``ValueError`` for bad input keeps working.
"""

from __future__ import annotations


class SchedulingError(Exception):
    """Base class for simulator errors."""


class InvalidInputError(SchedulingError, ValueError):
    """The process set or policy parameters were rejected before simulation."""


class DegenerateMetricError(SchedulingError, ArithmeticError):
    """A metric is undefined for the given report (e.g. zero makespan)."""


class InternalInvariantError(SchedulingError, RuntimeError):
    """A scheduling loop exceeded its iteration bound."""
