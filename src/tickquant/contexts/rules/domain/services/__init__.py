from .predicates import above, below, crosses_above, crosses_below

__all__ = ["above", "below", "crosses_above", "crosses_below"]
