from .services import RuleExecutor

__all__ = ["RuleExecutor"]
