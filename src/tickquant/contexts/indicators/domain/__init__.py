from .entities import IndicatorDef, IndicatorId, ParamDef, ParamKind
from .errors import InvalidParameterError, UnknownIndicatorError

__all__ = [
    "IndicatorDef",
    "IndicatorId",
    "InvalidParameterError",
    "ParamDef",
    "ParamKind",
    "UnknownIndicatorError",
]
