from __future__ import annotations

from enum import Enum


class AllocationPolicy(str, Enum):
    """
    How much cash a buy may spend.

    USE_ALL_AVAILABLE_CASH: free cash left at that point of the step, capped at
      `target_weight * free cash at the start of the step`. Held positions do not count.
    FIXED_WEIGHT: `min(free cash, target_weight * current equity)`.
    """

    USE_ALL_AVAILABLE_CASH = "use_all_available_cash"
    FIXED_WEIGHT = "fixed_weight"
