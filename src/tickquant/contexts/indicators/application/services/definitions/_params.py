from __future__ import annotations

from tickquant.contexts.indicators.domain.entities import ParamDef, ParamKind


def window_param(*, name: str = "window", default: int) -> ParamDef:
    return ParamDef(name=name, kind=ParamKind.INT, default=default, hard_min=1)
