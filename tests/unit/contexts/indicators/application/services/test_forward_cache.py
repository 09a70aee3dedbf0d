from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest

from tickquant.contexts.indicators.application.services import ForwardCache
from tickquant.shared_kernel.primitives import Tick, UtcTimestamp

_TS = UtcTimestamp(datetime(2024, 1, 1, tzinfo=timezone.utc))


class _CountingProducer:
    def __init__(self) -> None:
        self.calls: list[int] = []
        self._lock = threading.Lock()

    def __call__(self, index: int, previous: Tick[int] | None) -> Tick[int]:
        with self._lock:
            self.calls.append(index)
        base = previous.value if previous is not None and previous.value is not None else 0
        return Tick(timestamp=_TS, value=base + index)


def test_get_fills_forward_once_per_index() -> None:
    """
    Verify a miss fills every missing index in ascending order and hits never recompute.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Producer output depends on the previous tick (running sum of indices).
    Raises:
        AssertionError: If fill order or memoization regresses.
    Side Effects:
        None.
    """
    producer = _CountingProducer()
    cache: ForwardCache[int] = ForwardCache(length=6, producer=producer)

    assert cache.get(3).value == 0 + 1 + 2 + 3
    assert producer.calls == [0, 1, 2, 3]
    assert cache.filled_count == 4

    assert cache.get(1).value == 1
    assert cache.get(5).value == 15
    assert producer.calls == [0, 1, 2, 3, 4, 5]


def test_get_rejects_out_of_range_index() -> None:
    cache: ForwardCache[int] = ForwardCache(length=2, producer=_CountingProducer())
    with pytest.raises(IndexError):
        cache.get(2)
    with pytest.raises(IndexError):
        cache.get(-1)


def test_materialize_empty_and_full() -> None:
    assert ForwardCache(length=0, producer=_CountingProducer()).materialize() == ()
    cache: ForwardCache[int] = ForwardCache(length=3, producer=_CountingProducer())
    assert [tick.value for tick in cache.materialize()] == [0, 1, 3]


def test_negative_length_is_rejected() -> None:
    with pytest.raises(ValueError):
        ForwardCache(length=-1, producer=_CountingProducer())


def test_concurrent_readers_compute_each_index_once() -> None:
    producer = _CountingProducer()
    cache: ForwardCache[int] = ForwardCache(length=2_000, producer=producer)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda index: cache.get(index).value, [1_999] * 16))

    assert set(results) == {sum(range(2_000))}
    assert producer.calls == list(range(2_000))
