from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .utc_timestamp import UtcTimestamp


@dataclass(frozen=True, slots=True)
class TimeRange:
    """
    TimeRange — half-open time interval `[start, end)`.

    Invariants:
    - start < end
    """

    start: UtcTimestamp
    end: UtcTimestamp

    def __post_init__(self) -> None:
        if self.start.value >= self.end.value:
            raise ValueError(
                f"TimeRange requires start < end, got start={self.start} end={self.end}"
            )

    def duration(self) -> timedelta:
        """Range length as timedelta (end - start)."""
        return self.end.value - self.start.value

    def contains(self, ts: UtcTimestamp) -> bool:
        """Point membership with `[start, end)` semantics."""
        return self.start.value <= ts.value < self.end.value
