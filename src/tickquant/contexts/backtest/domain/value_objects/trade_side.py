from __future__ import annotations

from enum import Enum


class TradeSide(str, Enum):
    BUY = "buy"
    SELL = "sell"
