"""
Bounded FIFO primitives for the streaming averager.

Pure-Python + NumPy, no pandas, so the window can sit on a hot path
that receives one observation at a time.

Both buffers of :class:`~movavg.averager.SlidingAverager` are a
:class:`FifoWindow`: the value window (capacity = period) and the
key-delay window (capacity = delay).  Typical usage::

    window = FifoWindow(3)
    for value in stream:
        window.push(value)
        mask = present_mask(window.values())
"""

from __future__ import annotations

from collections import deque
from typing import Any, Iterator, Optional

import numpy as np

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def present_mask(arr: np.ndarray) -> np.ndarray:
    """Boolean mask, ``True`` where *arr* holds a present (non-NaN) value."""
    return ~np.isnan(arr)


# ---------------------------------------------------------------------------
# FifoWindow
# ---------------------------------------------------------------------------

class FifoWindow:
    """FIFO buffer holding at most *capacity* items.

    New items are appended on the right; once the buffer grows past
    *capacity* the left-most (oldest) item is evicted and handed back to
    the caller.  A capacity of 0 evicts every pushed item immediately.

    The capacity can be changed after construction (the averager's
    setters do so); a shrink takes effect on the next :meth:`push`.

    Parameters
    ----------
    capacity : int
        Maximum number of items to keep.

    Examples
    --------
    >>> w = FifoWindow(2)
    >>> w.push("a"), w.push("b"), w.push("c")
    (None, None, 'a')
    >>> list(w)
    ['b', 'c']
    """

    __slots__ = ("_capacity", "_buf")

    def __init__(self, capacity: int) -> None:
        self._capacity: int = capacity
        self._buf: deque[Any] = deque()

    # -- mutators -----------------------------------------------------------

    def push(self, item: Any) -> Optional[Any]:
        """Append *item*; return the evicted oldest item, or ``None``.

        At most one item is evicted per push, except after the capacity
        was lowered, when the buffer is trimmed back down in one go and
        the most recently evicted item is returned.
        """
        self._buf.append(item)
        evicted = None
        while len(self._buf) > max(self._capacity, 0):
            evicted = self._buf.popleft()
        return evicted

    def reset(self) -> None:
        """Drop all stored items."""
        self._buf.clear()

    # -- state queries ------------------------------------------------------

    def is_within_capacity(self) -> bool:
        return len(self._buf) <= max(self._capacity, 0)

    def __len__(self) -> int:
        return len(self._buf)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._buf)

    @property
    def capacity(self) -> int:
        """Configured capacity."""
        return self._capacity

    @capacity.setter
    def capacity(self, capacity: int) -> None:
        self._capacity = capacity

    # -- accessors ----------------------------------------------------------

    def values(self) -> np.ndarray:
        """Return a **copy** of the buffer as a 1-D float64 array.

        Absent items (``None``) become ``np.nan``.  Only meaningful for
        numeric windows.
        """
        return np.array(
            [np.nan if x is None else x for x in self._buf],
            dtype=np.float64,
        )

    # -- dunder -------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"FifoWindow(capacity={self._capacity}, "
            f"filled={len(self._buf)}/{self._capacity})"
        )
