from .invalid_parameter_error import InvalidParameterError
from .unknown_indicator_error import UnknownIndicatorError

__all__ = ["InvalidParameterError", "UnknownIndicatorError"]
