from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence

from tickquant.contexts.indicators.domain.errors import InvalidParameterError

from .indicator_id import IndicatorId
from .param_def import ParamDef


@dataclass(frozen=True, slots=True)
class IndicatorDef:
    """
    Catalog entry: identifier, positional parameter declarations and factory.

    The factory is called as `factory(series, *normalized_params)` and returns a `TickSource`.

    Related:
      - src/tickquant/contexts/indicators/domain/entities/param_def.py
      - src/tickquant/contexts/indicators/application/services/indicator_catalog.py
    """

    indicator_id: IndicatorId
    title: str
    params: tuple[ParamDef, ...]
    factory: Callable[..., Any]

    def __post_init__(self) -> None:
        """
        Validate definition invariants.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Defaulted parameters form a suffix of the parameter list.
        Raises:
            ValueError: If names collide, defaults are not a suffix, or factory is missing.
        Side Effects:
            Normalizes `params` to tuple.
        """
        object.__setattr__(self, "params", tuple(self.params))
        if not callable(self.factory):
            raise ValueError(f"IndicatorDef {self.indicator_id} requires callable factory")

        names = [param.name for param in self.params]
        if len(set(names)) != len(names):
            raise ValueError(f"IndicatorDef {self.indicator_id} has duplicate param names")

        seen_default = False
        for param in self.params:
            if param.has_default:
                seen_default = True
            elif seen_default:
                raise ValueError(
                    f"IndicatorDef {self.indicator_id}: param {param.name} without default "
                    "follows a defaulted param"
                )

    def resolve_params(self, values: Sequence[object]) -> tuple[int | float, ...]:
        """
        Fill omitted trailing defaults and normalize every value.

        Args:
            values: Explicit positional values supplied by caller.
        Returns:
            tuple[int | float, ...]: Full normalized parameter tuple.
        Assumptions:
            Omitted values and explicit defaults produce identical tuples.
        Raises:
            InvalidParameterError: If too many values are supplied, a required value is
                missing, or a value is invalid.
        Side Effects:
            None.
        """
        if len(values) > len(self.params):
            raise InvalidParameterError(
                f"{self.indicator_id} expects at most {len(self.params)} params, "
                f"got {len(values)}",
                details={"indicator_id": str(self.indicator_id), "given": len(values)},
            )

        resolved: list[int | float] = []
        for position, param in enumerate(self.params):
            if position < len(values):
                resolved.append(param.normalize(values[position]))
                continue
            if not param.has_default:
                raise InvalidParameterError(
                    f"{self.indicator_id} requires param {param.name}",
                    details={"indicator_id": str(self.indicator_id), "param": param.name},
                )
            resolved.append(param.normalize(param.default))
        return tuple(resolved)
