from __future__ import annotations

from dataclasses import dataclass

from tickquant.contexts.indicators.domain.errors import InvalidParameterError

from .param_kind import ParamKind


@dataclass(frozen=True, slots=True)
class ParamDef:
    """
    Declaration of one positional indicator parameter.

    Related: .param_kind, .indicator_def
    """

    name: str
    kind: ParamKind
    default: int | float | None = None
    hard_min: int | float | None = None
    hard_max: int | float | None = None

    def __post_init__(self) -> None:
        """
        Validate parameter declaration invariants.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            `default`, when present, must itself be a valid value.
        Raises:
            ValueError: If name is blank, bounds are inverted, or default is out of bounds.
        Side Effects:
            Normalizes `name` by stripping spaces.
        """
        normalized_name = self.name.strip()
        object.__setattr__(self, "name", normalized_name)
        if not normalized_name:
            raise ValueError("ParamDef requires a non-empty name")
        if (
            self.hard_min is not None
            and self.hard_max is not None
            and self.hard_min > self.hard_max
        ):
            raise ValueError("ParamDef requires hard_min <= hard_max")
        if self.default is not None:
            try:
                self.normalize(self.default)
            except InvalidParameterError as error:
                raise ValueError(f"ParamDef {normalized_name} default is invalid") from error

    @property
    def has_default(self) -> bool:
        return self.default is not None

    def normalize(self, value: object) -> int | float:
        """
        Coerce one raw value to the declared kind and check bounds.

        Args:
            value: Raw parameter value.
        Returns:
            int | float: Normalized value; ints stay ints, floats become `float`.
        Assumptions:
            Bool values are rejected even though `bool` subclasses `int`.
        Raises:
            InvalidParameterError: If value type or range is invalid.
        Side Effects:
            None.
        """
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise InvalidParameterError(
                f"parameter {self.name} must be numeric, got {type(value).__name__}",
                details={"param": self.name},
            )
        if self.kind is ParamKind.INT:
            if isinstance(value, float) and not value.is_integer():
                raise InvalidParameterError(
                    f"parameter {self.name} must be an integer, got {value!r}",
                    details={"param": self.name},
                )
            normalized: int | float = int(value)
        else:
            normalized = float(value)

        if self.hard_min is not None and normalized < self.hard_min:
            raise InvalidParameterError(
                f"parameter {self.name} must be >= {self.hard_min}, got {normalized!r}",
                details={"param": self.name, "hard_min": self.hard_min},
            )
        if self.hard_max is not None and normalized > self.hard_max:
            raise InvalidParameterError(
                f"parameter {self.name} must be <= {self.hard_max}, got {normalized!r}",
                details={"param": self.name, "hard_max": self.hard_max},
            )
        return normalized
