from __future__ import annotations

from functools import lru_cache
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from tickquant.contexts.indicators.domain.entities import IndicatorDef, IndicatorId
from tickquant.contexts.indicators.domain.errors import UnknownIndicatorError
from tickquant.shared_kernel.primitives import CandleSeries

from .definitions import all_defs


class IndicatorCatalog:
    """
    Read-only lookup of indicator definitions by id.

    Related:
      - src/tickquant/contexts/indicators/application/services/definitions/__init__.py
      - src/tickquant/contexts/evaluation/application/services/evaluation_context.py
    """

    def __init__(self, *, defs: Sequence[IndicatorDef]) -> None:
        """
        Build deterministic lookup from definitions.

        Args:
            defs: Indicator definitions.
        Returns:
            None.
        Assumptions:
            Definitions are already valid domain objects.
        Raises:
            ValueError: If two definitions share one id.
        Side Effects:
            None.
        """
        ordered_defs = tuple(sorted(defs, key=lambda definition: definition.indicator_id.value))
        defs_by_id: dict[str, IndicatorDef] = {}
        for definition in ordered_defs:
            indicator_id = definition.indicator_id.value
            if indicator_id in defs_by_id:
                raise ValueError(f"duplicate indicator_id in catalog: {indicator_id}")
            defs_by_id[indicator_id] = definition

        self._defs = ordered_defs
        self._defs_by_id: Mapping[str, IndicatorDef] = MappingProxyType(defs_by_id)

    def list_defs(self) -> tuple[IndicatorDef, ...]:
        return self._defs

    def ids(self) -> tuple[str, ...]:
        return tuple(definition.indicator_id.value for definition in self._defs)

    def __contains__(self, indicator_id: object) -> bool:
        if isinstance(indicator_id, IndicatorId):
            return indicator_id.value in self._defs_by_id
        if isinstance(indicator_id, str):
            return indicator_id.strip().lower() in self._defs_by_id
        return False

    def get_def(self, indicator_id: IndicatorId | str) -> IndicatorDef:
        """
        Resolve one definition.

        Args:
            indicator_id: Id object or raw id text.
        Returns:
            IndicatorDef: Matching definition.
        Assumptions:
            Raw text is normalized like `IndicatorId`.
        Raises:
            UnknownIndicatorError: If id is not present.
        Side Effects:
            None.
        """
        key = indicator_id.value if isinstance(indicator_id, IndicatorId) else (
            indicator_id.strip().lower()
        )
        definition = self._defs_by_id.get(key)
        if definition is None:
            raise UnknownIndicatorError(indicator_id=key)
        return definition

    def resolve_params(
        self,
        indicator_id: IndicatorId | str,
        params: Sequence[object],
    ) -> tuple[int | float, ...]:
        return self.get_def(indicator_id).resolve_params(params)

    def create(
        self,
        indicator_id: IndicatorId | str,
        series: CandleSeries,
        *params: object,
    ) -> Any:
        """Build a fresh tick source, filling omitted default params."""
        definition = self.get_def(indicator_id)
        return definition.factory(series, *definition.resolve_params(params))


@lru_cache(maxsize=1)
def default_catalog() -> IndicatorCatalog:
    """Process-wide catalog of built-in definitions (immutable, built once)."""
    return IndicatorCatalog(defs=all_defs())
