from __future__ import annotations

import threading
from typing import Callable, Generic, Optional, TypeVar

from tickquant.shared_kernel.primitives import Tick

T = TypeVar("T")

TickProducer = Callable[[int, Optional[Tick[T]]], Tick[T]]


class ForwardCache(Generic[T]):
    """
    Left-to-right memo of ticks shared by every indicator strategy and derived operation.

    The producer is called as `producer(index, previous_tick)` exactly once per index, in
    ascending order, where `previous_tick` is the cached tick at `index - 1` (or `None` at
    index 0). A request for index `i` fills every missing index up to `i` in one pass; later
    requests for any index `<= i` are O(1).

    Related:
      - src/tickquant/contexts/indicators/application/services/indicators.py
      - src/tickquant/contexts/indicators/application/services/operations.py
    """

    __slots__ = ("_length", "_producer", "_ticks", "_lock")

    def __init__(self, *, length: int, producer: TickProducer[T]) -> None:
        """
        Store producer and allocate empty memo.

        Args:
            length: Number of addressable indices.
            producer: Function computing one tick from its index and previous tick.
        Returns:
            None.
        Assumptions:
            Producer is pure; it may read other tick sources.
        Raises:
            ValueError: If length is negative.
        Side Effects:
            None.
        """
        if length < 0:
            raise ValueError(f"ForwardCache length must be >= 0, got {length}")
        self._length = length
        self._producer = producer
        self._ticks: list[Tick[T]] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return self._length

    @property
    def filled_count(self) -> int:
        return len(self._ticks)

    def get(self, index: int) -> Tick[T]:
        """
        Return cached tick, filling forward from the last cached index on a miss.

        Args:
            index: Non-negative index below `len(self)`.
        Returns:
            Tick[T]: Tick at `index`.
        Assumptions:
            Concurrent callers block on one fill loop; list appends are never reordered.
        Raises:
            IndexError: If index is out of range.
        Side Effects:
            Extends the memo up to `index`.
        """
        if index < 0 or index >= self._length:
            raise IndexError(f"tick index out of range: {index} (length={self._length})")

        ticks = self._ticks
        if index < len(ticks):
            return ticks[index]

        with self._lock:
            for position in range(len(ticks), index + 1):
                previous = ticks[position - 1] if position > 0 else None
                ticks.append(self._producer(position, previous))
            return ticks[index]

    def materialize(self) -> tuple[Tick[T], ...]:
        """Fill every index and return all ticks in order."""
        if self._length == 0:
            return ()
        self.get(self._length - 1)
        return tuple(self._ticks)
