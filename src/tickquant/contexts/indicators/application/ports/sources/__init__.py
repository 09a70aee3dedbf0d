from .tick_source import TickSource

__all__ = ["TickSource"]
