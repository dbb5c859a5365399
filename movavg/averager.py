"""
Streaming moving-average calculator.

Ingests observations one at a time via :meth:`SlidingAverager.calculate_next`,
keeps the last *period* values in a FIFO window and emits an average
for every input, tagged with a key that may be held back by *delay*
steps.  A delay of ``period // 2`` centres the average on the emitted
key; a delay of 0 gives the usual trailing average.

Architecture
------------
::

    (key, value) pairs, one by one
           │
           ▼
      ┌──────────────────────────┐
      │      SlidingAverager     │
      │  value window (period)   │──► average of the window
      │  key window   (delay)    │──► oldest key, once full
      └────────────┬─────────────┘
                   │  (key, average) once the key is ready
                   ▼
         dict  /  iterator of pairs

*   :meth:`~SlidingAverager.calculate_next` is **O(period)** per step.
*   After the last input the averager *drains*: it pushes ``delay``
    absent values so the held-back keys still receive an average over
    the values that remain.
*   Not thread-safe.  One instance per stream; call
    :meth:`~SlidingAverager.clear` before reusing it.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .rolling import FifoWindow, present_mask
from .types import (
    AverageMethod,
    AveragerLogicError,
    DivisionByZeroError,
    DrainKey,
    InvalidConfigurationError,
    Key,
    ReadyPair,
    Value,
)

log = logging.getLogger(__name__)

Weight = Union[int, float]


# ---------------------------------------------------------------------------
# SlidingAverager
# ---------------------------------------------------------------------------

class SlidingAverager:
    """Sliding-window moving average with optional weights and output delay.

    Parameters
    ----------
    method : AverageMethod | str, optional
        Averaging method.  Defaults to :attr:`AverageMethod.ARITHMETIC`.

    Raises
    ------
    InvalidConfigurationError
        If *method* is not a known :class:`AverageMethod`.

    Examples
    --------
    >>> ma = SlidingAverager(AverageMethod.ARITHMETIC)
    >>> ma.set_period(3).set_delay(1)
    SlidingAverager(method='arithmetic', period=3, delay=1, values=0/3, keys=0/1)
    >>> ma.compute_from_sequence({"a": 1, "b": 2, "c": 3})
    {'a': 1.5, 'b': 2.0, 'c': 2.5}
    """

    def __init__(self, method: AverageMethod | str | None = None) -> None:
        self._method: AverageMethod = self._coerce_method(method)

        self._period: int = 1
        self._delay: int = 0
        self._weights: List[Weight] = []

        self._values = FifoWindow(self._period)
        self._keys = FifoWindow(self._delay)

    @staticmethod
    def _coerce_method(method: AverageMethod | str | None) -> AverageMethod:
        if method is None:
            return AverageMethod.ARITHMETIC
        try:
            return AverageMethod(method)
        except ValueError:
            raise InvalidConfigurationError(
                f"invalid method {method!r}; expected one of "
                f"{[m.value for m in AverageMethod]}"
            ) from None

    # -- lifecycle ----------------------------------------------------------

    def clear(self) -> None:
        """Drop the buffered values and keys, keep the settings."""
        self._values.reset()
        self._keys.reset()

    def reset(self) -> None:
        """Restore default settings (period 1, delay 0, no weights) and clear."""
        self.clear()
        self._period = 1
        self._delay = 0
        self._weights = []
        self._values.capacity = self._period
        self._keys.capacity = self._delay

    # -- settings -----------------------------------------------------------

    def set_period(self, period: int) -> SlidingAverager:
        """Set the number of values averaged.

        Fills the weights with ``period`` ones when none are set yet.
        """
        self._period = period
        self._values.capacity = period
        if not self._weights:
            self.set_default_weights_for_period(1)
        return self

    def set_delay(self, delay: int) -> SlidingAverager:
        """Set how many steps an output key is held back."""
        self._delay = delay
        self._keys.capacity = delay
        return self

    def set_weights(self, weights: Sequence[Weight]) -> SlidingAverager:
        """Set per-position weights, oldest first.  Length should equal period."""
        self._weights = list(weights)
        return self

    def set_default_weights_for_period(self, weight: Weight = 1) -> SlidingAverager:
        """Give every position of the window the same *weight*."""
        self._weights = [weight] * max(self._period, 0)
        return self

    @property
    def method(self) -> AverageMethod:
        return self._method

    @property
    def period(self) -> int:
        return self._period

    @property
    def delay(self) -> int:
        return self._delay

    @property
    def weights(self) -> Tuple[Weight, ...]:
        return tuple(self._weights)

    # -- validation ---------------------------------------------------------

    def validate_settings(self) -> bool:
        """``True`` when period, delay and weights do not clash."""
        return (
            self._period >= 1
            and self._delay >= 0
            and self._delay <= self._period
            and len(self._weights) == self._period
        )

    def assert_valid_settings(self) -> None:
        """Raise :class:`InvalidConfigurationError` unless the settings are valid."""
        if self.validate_settings():
            log.debug(
                "settings ok: method=%s period=%d delay=%d",
                self._method.value, self._period, self._delay,
            )
            return
        raise InvalidConfigurationError(
            f"invalid setting combination: period={self._period}, "
            f"delay={self._delay}, weights={len(self._weights)} "
            "(need period >= 1, 0 <= delay <= period, "
            "len(weights) == period)"
        )

    def validate_buffers(self) -> bool:
        """``True`` when neither buffer exceeds its capacity."""
        return self._values.is_within_capacity() and self._keys.is_within_capacity()

    # -- averages -----------------------------------------------------------

    def _simple_average(self) -> float:
        arr = self._values.values()
        mask = present_mask(arr)
        denominator = int(mask.sum())
        if denominator == 0:
            raise DivisionByZeroError("empty_set: no present value in window")
        return float(arr[mask].sum() / denominator)

    def _weighted_average(self) -> float:
        arr = self._values.values()
        mask = present_mask(arr)

        # Window not full yet: use the right part of the weights.
        offset = self._period - len(arr)
        weights = np.asarray(self._weights[offset:], dtype=np.float64)

        denominator = float(weights[mask].sum())
        if denominator == 0:
            raise DivisionByZeroError("empty_set: no weighted value in window")
        numerator = float((arr[mask] * weights[mask]).sum())
        return numerator / denominator

    def _average(self) -> float:
        if self._method is AverageMethod.ARITHMETIC:
            return self._simple_average()
        if self._method is AverageMethod.WEIGHTED_ARITHMETIC:
            return self._weighted_average()
        raise AveragerLogicError(f"invalid method {self._method!r}")

    # -- core step ----------------------------------------------------------

    def calculate_next(self, value: Value, key: Key) -> Optional[Tuple[float, Key]]:
        """Add *value* and return ``(average, ready_key)`` once a key is ready.

        The average is over the window *including* *value*.  It belongs
        to the key pushed ``delay`` steps ago, which is returned with it.
        While fewer than ``delay + 1`` keys were pushed, returns ``None``.

        Raises
        ------
        DivisionByZeroError
            When the window holds no present value.
        """
        if key is None:
            raise ValueError("key must not be None")

        self._values.push(value)
        average = self._average()

        ready_key = self._keys.push(key)
        if ready_key is None:
            return None
        return average, ready_key

    def _drain(self) -> Iterator[ReadyPair]:
        """Flush the held-back keys by pushing ``delay`` absent values."""
        if self._delay > 0:
            log.debug("draining %d delayed key(s)", self._delay)
        for remaining in range(self._delay, 0, -1):
            nxt = self.calculate_next(None, DrainKey(remaining))
            if nxt is None:
                # Input was shorter than the delay.
                continue
            average, ready_key = nxt
            yield ready_key, average

    def _generate(self, pairs: Iterable[Tuple[Key, Value]]) -> Iterator[ReadyPair]:
        debug = log.isEnabledFor(logging.DEBUG)
        for key, value in pairs:
            nxt = self.calculate_next(value, key)
            if nxt is None:
                if debug:
                    log.debug("key %r held back (%d/%d)", key, len(self._keys), self._delay)
                continue
            average, ready_key = nxt
            yield ready_key, average
        yield from self._drain()

    @staticmethod
    def _collect(ready: Iterable[ReadyPair]) -> Dict[Key, float]:
        results: Dict[Key, float] = {}
        for key, average in ready:
            results[key] = average
        return results

    # -- adapters -----------------------------------------------------------

    def compute_from_sequence(self, sources: Mapping[Key, Value]) -> Dict[Key, float]:
        """Average a whole ``{key: value}`` mapping into ``{key: average}``."""
        self.assert_valid_settings()
        return self._collect(self._generate(sources.items()))

    def stream_from_sequence(self, sources: Mapping[Key, Value]) -> Iterator[ReadyPair]:
        """Lazily yield ``(key, average)`` pairs for a ``{key: value}`` mapping.

        Settings are checked immediately, before the iterator is returned.
        """
        self.assert_valid_settings()
        return self._generate(sources.items())

    def compute_from_stream(self, sources: Iterable[Tuple[Key, Value]]) -> Dict[Key, float]:
        """Consume ``(key, value)`` pairs and return ``{key: average}``."""
        self.assert_valid_settings()
        return self._collect(self._generate(sources))

    def stream_from_stream(self, sources: Iterable[Tuple[Key, Value]]) -> Iterator[ReadyPair]:
        """Lazily turn ``(key, value)`` pairs into ``(key, average)`` pairs.

        Settings are checked immediately; *sources* is only pulled as the
        returned iterator is consumed.
        """
        self.assert_valid_settings()
        return self._generate(sources)

    # -- dunder -------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"SlidingAverager(method={self._method.value!r}, "
            f"period={self._period}, delay={self._delay}, "
            f"values={len(self._values)}/{self._period}, "
            f"keys={len(self._keys)}/{self._delay})"
        )
