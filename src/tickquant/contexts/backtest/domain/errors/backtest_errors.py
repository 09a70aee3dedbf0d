from __future__ import annotations

from typing import Mapping, Sequence

from tickquant.platform.errors import TickQuantError


class InvalidConfigurationError(TickQuantError):
    """
    Raised when a backtest portfolio configuration violates builder invariants.

    Related:
      - src/tickquant/contexts/backtest/application/services/backtest_builder.py
      - src/tickquant/platform/errors/tickquant_error.py
    """

    code = "invalid_configuration"

    def __init__(
        self,
        message: str,
        *,
        errors: Sequence[Mapping[str, str]] | None = None,
    ) -> None:
        """
        Build validation error with optional deterministic item payload.

        Args:
            message: Human-readable validation failure description.
            errors: Optional detailed validation items (`path`, `code`, `message`).
        Returns:
            None.
        Assumptions:
            Missing item fields are normalized to deterministic fallback values.
        Raises:
            None.
        Side Effects:
            Stores normalized immutable validation items.
        """
        normalized_errors: list[dict[str, str]] = []
        if errors is not None:
            for item in errors:
                normalized_errors.append(
                    {
                        "path": str(item.get("path", "unknown")),
                        "code": str(item.get("code", "validation_error")),
                        "message": str(item.get("message", "Validation error")),
                    }
                )
        self._errors = tuple(normalized_errors)
        super().__init__(message, details={"errors": normalized_errors})

    @property
    def errors(self) -> tuple[Mapping[str, str], ...]:
        return self._errors
