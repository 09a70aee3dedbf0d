"""
Built-in indicator definitions grouped by family.
"""

from __future__ import annotations

from tickquant.contexts.indicators.domain.entities import IndicatorDef

from . import ma, momentum, price, volatility, volume


def all_defs() -> tuple[IndicatorDef, ...]:
    """
    Return every built-in definition sorted by indicator id.

    Args:
        None.
    Returns:
        tuple[IndicatorDef, ...]: Deterministically ordered definitions.
    Assumptions:
        Ids are unique across groups; the catalog re-checks.
    Raises:
        ValueError: If any definition violates domain invariants.
    Side Effects:
        None.
    """
    items = (
        *price.defs(),
        *ma.defs(),
        *momentum.defs(),
        *volatility.defs(),
        *volume.defs(),
    )
    return tuple(sorted(items, key=lambda definition: definition.indicator_id.value))


__all__ = ["all_defs", "ma", "momentum", "price", "volatility", "volume"]
