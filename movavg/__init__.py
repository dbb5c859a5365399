"""
Streaming moving averages.

Public API
----------
- :class:`SlidingAverager`: windowed (weighted) average with output delay.
- :class:`AverageMethod`: ``ARITHMETIC`` / ``WEIGHTED_ARITHMETIC``.
- :class:`AveragerConfig` / :func:`load_averager_config` /
  :func:`build_averager`: settings from code or YAML.
- :func:`moving_average` / :func:`moving_average_frame` /
  :func:`load_series`: pandas adapters.
- :class:`InvalidConfigurationError`, :class:`DivisionByZeroError`,
  :class:`AveragerLogicError`: errors.
"""

from .averager import SlidingAverager
from .config import (
    AveragerConfig,
    averager_config_from_dict,
    build_averager,
    load_averager_config,
)
from .pipeline import load_series, moving_average, moving_average_frame
from .rolling import FifoWindow
from .types import (
    AverageMethod,
    AveragerLogicError,
    DivisionByZeroError,
    DrainKey,
    InvalidConfigurationError,
)

__all__ = [
    "SlidingAverager",
    "AverageMethod",
    "AveragerConfig",
    "averager_config_from_dict",
    "build_averager",
    "load_averager_config",
    "load_series",
    "moving_average",
    "moving_average_frame",
    "FifoWindow",
    "DrainKey",
    "InvalidConfigurationError",
    "DivisionByZeroError",
    "AveragerLogicError",
]
