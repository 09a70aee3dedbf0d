from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence

from tickquant.contexts.indicators.domain.errors import InvalidParameterError


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    """
    One registered name: callable plus declared positional parameter count.

    `arity=None` accepts any number of parameters.

    Related:
      - src/tickquant/contexts/registry/application/services/name_registry.py
      - src/tickquant/contexts/evaluation/application/services/evaluation_context.py
    """

    name: str
    function: Callable[..., Any]
    arity: int | None = None

    def __post_init__(self) -> None:
        normalized = self.name.strip()
        object.__setattr__(self, "name", normalized)
        if not normalized:
            raise ValueError("RegistryEntry name must be non-empty")
        if not callable(self.function):
            raise ValueError(f"RegistryEntry {normalized} requires a callable")
        if self.arity is not None and (isinstance(self.arity, bool) or self.arity < 0):
            raise ValueError(f"RegistryEntry {normalized} arity must be >= 0")

    def check_params(self, params: Sequence[object]) -> tuple[object, ...]:
        """
        Validate bound parameter count.

        Args:
            params: Positional parameters to bind.
        Returns:
            tuple[object, ...]: Parameters as tuple.
        Assumptions:
            Parameter values are validated by the callable itself.
        Raises:
            InvalidParameterError: If count differs from declared arity.
        Side Effects:
            None.
        """
        bound = tuple(params)
        if self.arity is not None and len(bound) != self.arity:
            raise InvalidParameterError(
                f"{self.name} expects {self.arity} params, got {len(bound)}",
                details={"name": self.name, "arity": self.arity, "given": len(bound)},
            )
        return bound
