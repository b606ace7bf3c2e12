from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import InvalidInputError

# Round Robin quantum used by the CLI when --quantum is not given.
DEFAULT_QUANTUM = 2

IDLE_LABEL = "Idle"

DEFAULT_LOG_LEVEL = "WARNING"

# Decimal places used when printing metrics.
DECIMALS = 2

QUANTUM_ENV = "SCHEDSIM_QUANTUM"
LOG_LEVEL_ENV = "SCHEDSIM_LOG_LEVEL"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    quantum: int = DEFAULT_QUANTUM
    log_level: str = DEFAULT_LOG_LEVEL
    decimals: int = DECIMALS


def get_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the defaults above, overridden by SCHEDSIM_QUANTUM
    and SCHEDSIM_LOG_LEVEL when present.
    """
    env = os.environ if environ is None else environ

    quantum = DEFAULT_QUANTUM
    raw_quantum = env.get(QUANTUM_ENV, "").strip()
    if raw_quantum:
        try:
            quantum = int(raw_quantum)
        except ValueError:
            raise InvalidInputError(f"{QUANTUM_ENV} must be an integer, got {raw_quantum!r}") from None
        if quantum <= 0:
            raise InvalidInputError(f"{QUANTUM_ENV} must be positive, got {quantum}")

    log_level = env.get(LOG_LEVEL_ENV, "").strip().upper() or DEFAULT_LOG_LEVEL
    if log_level not in _LOG_LEVELS:
        raise InvalidInputError(f"{LOG_LEVEL_ENV} must be one of {sorted(_LOG_LEVELS)}, got {log_level!r}")

    return Settings(quantum=quantum, log_level=log_level)
