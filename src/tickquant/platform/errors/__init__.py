from .tickquant_error import TickQuantError

__all__ = [
    "TickQuantError",
]
