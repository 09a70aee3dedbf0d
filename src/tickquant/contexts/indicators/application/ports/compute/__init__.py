from .rolling_window_compute import RollingWindowCompute

__all__ = ["RollingWindowCompute"]
