from .invalid_period_error import InvalidPeriodError

__all__ = ["InvalidPeriodError"]
