from __future__ import annotations

from tickquant.platform.errors import TickQuantError


class InvalidParameterError(TickQuantError):
    """
    Raised when an indicator, operation or registry entry is constructed with bad parameters.

    Examples: non-positive period count, negative seed index, constant smoothing factor
    outside `(0, 1]`, wrong parameter count for a registered callable.

    Related:
      - src/tickquant/contexts/indicators/application/services/indicators.py
      - src/tickquant/contexts/indicators/application/services/operations.py
      - src/tickquant/contexts/registry/domain/entities/registry_entry.py
    """

    code = "invalid_parameter"
