from .registry_errors import DuplicateNameError, UnknownNameError

__all__ = ["DuplicateNameError", "UnknownNameError"]
