from __future__ import annotations

from enum import Enum


class ParamKind(str, Enum):
    """
    Value family of an indicator parameter.

    Related: .param_def
    """

    INT = "int"
    FLOAT = "float"
