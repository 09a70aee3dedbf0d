from .errors import InvalidPeriodError
from .services import transform_series

__all__ = ["InvalidPeriodError", "transform_series"]
