from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from functools import total_ordering

from .utc_timestamp import UtcTimestamp

_EPOCH_UTC = datetime(1970, 1, 1, tzinfo=timezone.utc)


@total_ordering
class Period(Enum):
    """
    Period — ordered series granularity (`SECOND < MINUTE < ... < MONTH`).

    Enum value is `(rank, code, fixed_seconds)`; calendar periods (`WEEK`, `MONTH`) align to
    Monday 00:00 UTC and day 1 00:00 UTC, sub-week periods are epoch-aligned in UTC.
    """

    SECOND = (0, "1s", 1)
    MINUTE = (1, "1m", 60)
    MINUTE_15 = (2, "15m", 15 * 60)
    MINUTE_30 = (3, "30m", 30 * 60)
    HOUR = (4, "1h", 60 * 60)
    HOUR_2 = (5, "2h", 2 * 60 * 60)
    DAY = (6, "1d", 24 * 60 * 60)
    WEEK = (7, "1w", None)
    MONTH = (8, "1mo", None)

    @property
    def rank(self) -> int:
        return self.value[0]

    @property
    def code(self) -> str:
        return self.value[1]

    @classmethod
    def parse(cls, code: str) -> Period:
        """Resolve period from its code (`"1d"`) or enum name (`"day"`)."""
        normalized = code.strip()
        for period in cls:
            if normalized == period.code or normalized.upper() == period.name:
                return period
        raise ValueError(
            f"Unsupported period={code!r}. Supported: {[period.code for period in cls]}"
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Period):
            return NotImplemented
        return self.rank < other.rank

    def is_coarser_than(self, other: Period) -> bool:
        return self.rank > other.rank

    def bucket_open(self, ts: UtcTimestamp) -> UtcTimestamp:
        """
        Start of the bucket containing `ts`.

        Pure time alignment; aggregation lives in the series transform.
        """
        dt = ts.value
        if self is Period.MONTH:
            return UtcTimestamp(dt.replace(day=1, hour=0, minute=0, second=0, microsecond=0))
        if self is Period.WEEK:
            midnight = dt.replace(hour=0, minute=0, second=0, microsecond=0)
            return UtcTimestamp(midnight - timedelta(days=midnight.weekday()))

        total_ms = (dt - _EPOCH_UTC) // timedelta(milliseconds=1)
        period_ms = int(self.value[2]) * 1000
        bucket_ms = (total_ms // period_ms) * period_ms
        return UtcTimestamp(_EPOCH_UTC + timedelta(milliseconds=bucket_ms))

    def __str__(self) -> str:
        return self.code
