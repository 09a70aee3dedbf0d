from .indicator_def import IndicatorDef
from .indicator_id import IndicatorId
from .param_def import ParamDef
from .param_kind import ParamKind

__all__ = ["IndicatorDef", "IndicatorId", "ParamDef", "ParamKind"]
