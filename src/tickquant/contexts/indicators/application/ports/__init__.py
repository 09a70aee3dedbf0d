from .compute import RollingWindowCompute
from .sources import TickSource

__all__ = ["RollingWindowCompute", "TickSource"]
