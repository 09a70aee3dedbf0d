from __future__ import annotations

from typing import Any, Mapping, Sequence


class TickQuantError(ValueError):
    """
    Canonical base error for configuration and construction failures of the analysis core.

    Related:
      - src/tickquant/contexts/indicators/domain/errors/invalid_parameter_error.py
      - src/tickquant/contexts/backtest/domain/errors/backtest_errors.py
      - src/tickquant/contexts/registry/domain/errors/registry_errors.py
    """

    code = "tickquant_error"

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        """
        Validate message and freeze details into deterministic plain payloads.

        Args:
            message: Human-readable failure description.
            details: Optional structured diagnostic payload.
        Returns:
            None.
        Assumptions:
            `code` is a stable machine-readable token defined by each subclass.
        Raises:
            ValueError: If message is blank.
            TypeError: If `details` is not mapping-compatible when provided.
        Side Effects:
            Stores normalized copy of `details`.
        """
        normalized_message = message.strip()
        if not normalized_message:
            raise ValueError(f"{type(self).__name__} message must be non-empty")
        super().__init__(normalized_message)
        self.message = normalized_message

        if details is None:
            self.details: Mapping[str, Any] = {}
            return
        if not isinstance(details, Mapping):
            raise TypeError(f"{type(self).__name__}.details must be a mapping when provided")
        self.details = _normalize_payload_value(value=dict(details))

    def to_payload(self) -> dict[str, Any]:
        """
        Build deterministic payload representation for callers that render errors.

        Args:
            None.
        Returns:
            dict[str, Any]: `{"error": {"code", "message", "details"}}` payload.
        Assumptions:
            `details` payload is already normalized during initialization.
        Raises:
            None.
        Side Effects:
            None.
        """
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": dict(self.details),
            }
        }


def _normalize_payload_value(*, value: Any) -> Any:
    """
    Normalize nested payload values into deterministic plain-Python structures.

    Args:
        value: Any JSON-compatible value.
    Returns:
        Any: Normalized scalar/list/dict representation.
    Assumptions:
        Non-JSON values are stringified.
    Raises:
        None.
    Side Effects:
        None.
    """
    if isinstance(value, Mapping):
        normalized_mapping: dict[str, Any] = {}
        sorted_items = sorted(value.items(), key=lambda item: str(item[0]))
        for raw_key, raw_value in sorted_items:
            normalized_mapping[str(raw_key)] = _normalize_payload_value(value=raw_value)
        return normalized_mapping

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [_normalize_payload_value(value=item) for item in value]

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value

    return str(value)
