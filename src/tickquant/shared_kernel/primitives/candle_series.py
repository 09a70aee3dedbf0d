from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from .candle import Candle
from .period import Period
from .symbol import Symbol
from .utc_timestamp import UtcTimestamp


@dataclass(frozen=True, slots=True)
class CandleSeries:
    """
    CandleSeries — immutable ordered candles of one symbol at one period.

    Invariants:
    - timestamps strictly increasing (no duplicates)
    - candles stored as tuple
    """

    symbol: Symbol
    period: Period
    candles: tuple[Candle, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.candles, tuple):
            object.__setattr__(self, "candles", tuple(self.candles))

        previous: UtcTimestamp | None = None
        for position, candle in enumerate(self.candles):
            if previous is not None and not previous < candle.timestamp:
                raise ValueError(
                    "CandleSeries requires strictly increasing timestamps: "
                    f"index={position} timestamp={candle.timestamp} previous={previous}"
                )
            previous = candle.timestamp

    @classmethod
    def of(
        cls,
        *,
        symbol: Symbol | str,
        period: Period,
        candles: Sequence[Candle],
    ) -> CandleSeries:
        """Build series accepting a plain symbol string."""
        normalized_symbol = symbol if isinstance(symbol, Symbol) else Symbol(symbol)
        return cls(symbol=normalized_symbol, period=period, candles=tuple(candles))

    def __len__(self) -> int:
        return len(self.candles)

    def __getitem__(self, index: int) -> Candle:
        return self.candles[index]

    def __iter__(self) -> Iterator[Candle]:
        return iter(self.candles)

    @property
    def timestamps(self) -> tuple[UtcTimestamp, ...]:
        return tuple(candle.timestamp for candle in self.candles)

    def index_of(self, timestamp: UtcTimestamp) -> int | None:
        """Binary search for exact timestamp; `None` when the series has no candle there."""
        low = 0
        high = len(self.candles) - 1
        while low <= high:
            middle = (low + high) // 2
            current = self.candles[middle].timestamp
            if current == timestamp:
                return middle
            if current < timestamp:
                low = middle + 1
            else:
                high = middle - 1
        return None

    def closes(self) -> tuple[float, ...]:
        return tuple(candle.close for candle in self.candles)
