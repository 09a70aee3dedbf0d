from __future__ import annotations

from dataclasses import dataclass

from .utc_timestamp import UtcTimestamp


@dataclass(frozen=True, slots=True)
class Candle:
    """
    Candle — one OHLCV bucket of a series.

    `timestamp` is the bucket open time.
    """

    timestamp: UtcTimestamp

    open: float
    high: float
    low: float
    close: float

    volume: float

    def __post_init__(self) -> None:
        if self.timestamp is None:  # type: ignore[truthy-bool]
            raise ValueError("Candle requires timestamp")

        # OHLC invariants
        if self.high < max(self.open, self.close):
            raise ValueError("Candle requires high >= max(open, close)")

        if self.low > min(self.open, self.close):
            raise ValueError("Candle requires low <= min(open, close)")

        if self.volume < 0:
            raise ValueError("Candle requires volume >= 0")

    def as_dict(self) -> dict:
        """Serialize candle with timestamp as `str(UtcTimestamp)`."""
        return {
            "timestamp": str(self.timestamp),
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }
