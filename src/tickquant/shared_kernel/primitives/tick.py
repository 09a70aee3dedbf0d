from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from .utc_timestamp import UtcTimestamp

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Tick(Generic[T]):
    """
    Tick — one timestamped computed value.

    `value is None` means absent: not enough history at this index.
    """

    timestamp: UtcTimestamp
    value: T | None = None

    @property
    def is_absent(self) -> bool:
        return self.value is None
