"""
Shared types for the moving-average engine.

Defines the averaging-method enum, the key / value aliases used by every
adapter, the synthetic key type used while draining delayed output, and
the exception hierarchy.

This module has no dependencies beyond the standard library so that it
can be imported from configuration code without pulling in NumPy.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Hashable, Optional, Tuple, Union

# ---------------------------------------------------------------------------
# Aliases
# ---------------------------------------------------------------------------

Key = Hashable
"""Output key.  Anything usable as a ``dict`` key (str, int, float, ...)."""

Value = Optional[Union[int, float]]
"""Input observation.  ``None`` marks an absent value."""

ReadyPair = Tuple[Key, float]
"""A ``(key, average)`` pair whose average is ready to be emitted."""


# ---------------------------------------------------------------------------
# AverageMethod
# ---------------------------------------------------------------------------

class AverageMethod(str, Enum):
    """
    Averaging method applied to the current window.

    Values
    ------
    ARITHMETIC : str
        Plain mean of the present values in the window.
    WEIGHTED_ARITHMETIC : str
        Mean weighted per window position (left = oldest, right = newest).
        While the window is warming up only the right-most weights apply.
    """
    ARITHMETIC = "arithmetic"
    WEIGHTED_ARITHMETIC = "weighted_arithmetic"


# ---------------------------------------------------------------------------
# DrainKey
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DrainKey:
    """Placeholder key pushed while flushing delayed output.

    Being its own type, it never compares equal to a caller's key.
    Drain keys fill the tail of the key-delay window and are never
    returned as ready keys.
    """

    remaining: int

    def __str__(self) -> str:
        return f"_delay:{self.remaining}"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class InvalidConfigurationError(ValueError):
    """Unknown method, or a period / delay / weights combination that clashes."""


class DivisionByZeroError(ZeroDivisionError):
    """The window holds no present value (or only zero weights) to average."""


class AveragerLogicError(RuntimeError):
    """Internal defect: the averager reached a branch it should never reach."""
