from .rule_executor import RuleExecutor

__all__ = ["RuleExecutor"]
