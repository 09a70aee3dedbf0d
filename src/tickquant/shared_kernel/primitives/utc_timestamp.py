from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

_EPOCH_UTC = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True, slots=True, order=True)
class UtcTimestamp:
    """
    UtcTimestamp — the single time type of the analysis core.

    Rules:
    - input datetime must be timezone-aware (naive is rejected)
    - stored in UTC
    - precision truncated to milliseconds
    """

    value: datetime

    def __post_init__(self) -> None:
        dt = self.value

        # tzinfo may be set while utcoffset() still returns None.
        if dt.tzinfo is None or dt.utcoffset() is None:
            raise ValueError("UtcTimestamp requires a timezone-aware datetime (naive datetime is forbidden)")  # noqa: E501

        dt_utc = dt.astimezone(timezone.utc)
        ms = (dt_utc.microsecond // 1000) * 1000
        object.__setattr__(self, "value", dt_utc.replace(microsecond=ms))

    @classmethod
    def from_epoch_ms(cls, epoch_ms: int) -> UtcTimestamp:
        """Build timestamp from integer milliseconds since Unix epoch."""
        return cls(_EPOCH_UTC + timedelta(milliseconds=int(epoch_ms)))

    def epoch_ms(self) -> int:
        """Milliseconds since Unix epoch."""
        return int((self.value - _EPOCH_UTC) // timedelta(milliseconds=1))

    def __str__(self) -> str:
        """
        ISO UTC with milliseconds and `Z` suffix.
        Example: 2026-02-04T12:34:56.789Z
        """
        s = self.value.isoformat(timespec="milliseconds")
        if s.endswith("+00:00"):
            s = s[:-6] + "Z"
        return s
