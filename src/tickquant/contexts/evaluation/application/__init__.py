from .services import BarView, BoundRule, EvaluationContext, evaluation_scope

__all__ = ["BarView", "BoundRule", "EvaluationContext", "evaluation_scope"]
