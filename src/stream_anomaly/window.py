"""Fixed-capacity FIFO buffer holding the most recent observations."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

__all__ = ["SlidingWindow"]


class SlidingWindow:
    """Bounded window of scalar observations in insertion order.

    The window never holds more than ``capacity`` values. Pushing into a full
    window evicts exactly one value, the oldest, before appending.

    Attributes:
        capacity: Maximum number of observations retained. Fixed for the
            lifetime of the window.
    """

    __slots__ = ("_capacity", "_values")

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be a positive integer")
        self._capacity = int(capacity)
        self._values: deque[float] = deque()

    @property
    def capacity(self) -> int:
        """Return the configured capacity."""

        return self._capacity

    def push(self, value: float) -> None:
        """Append ``value``, evicting the oldest observation when full."""

        if len(self._values) >= self._capacity:
            self._values.popleft()
        self._values.append(float(value))

    def is_empty(self) -> bool:
        return not self._values

    def is_full(self) -> bool:
        return len(self._values) >= self._capacity

    def values(self) -> tuple[float, ...]:
        """Return an immutable snapshot ordered oldest to newest."""

        return tuple(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(self._values)

    def __repr__(self) -> str:
        return (
            f"SlidingWindow(capacity={self._capacity}, "
            f"values={list(self._values)!r})"
        )
