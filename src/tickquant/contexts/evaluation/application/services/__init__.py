from .bar_view import BarView
from .bound_rule import BoundRule
from .evaluation_context import EvaluationContext, evaluation_scope

__all__ = ["BarView", "BoundRule", "EvaluationContext", "evaluation_scope"]
