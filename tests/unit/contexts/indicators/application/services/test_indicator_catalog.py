from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from tickquant.contexts.indicators.application.services import IndicatorCatalog, default_catalog
from tickquant.contexts.indicators.domain.entities import (
    IndicatorDef,
    IndicatorId,
    ParamDef,
    ParamKind,
)
from tickquant.contexts.indicators.domain.errors import (
    InvalidParameterError,
    UnknownIndicatorError,
)
from tickquant.shared_kernel.primitives import Candle, CandleSeries, Period, UtcTimestamp

_START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _series(size: int) -> CandleSeries:
    return CandleSeries.of(
        symbol="CAT",
        period=Period.DAY,
        candles=[
            Candle(
                timestamp=UtcTimestamp(_START + timedelta(days=offset)),
                open=10.0 + offset,
                high=11.0 + offset,
                low=9.0 + offset,
                close=10.5 + offset,
                volume=100.0,
            )
            for offset in range(size)
        ],
    )


def test_default_catalog_lists_builtin_ids_in_order() -> None:
    assert default_catalog().ids() == (
        "ma.ema",
        "ma.kama",
        "ma.rma",
        "ma.sma",
        "ma.wma",
        "momentum.macd",
        "momentum.macd_signal",
        "momentum.roc",
        "momentum.rsi",
        "price.close",
        "price.high",
        "price.low",
        "price.open",
        "price.volume",
        "volatility.atr",
        "volatility.stddev",
        "volatility.true_range",
        "volume.obv",
        "volume.vwap",
    )
    assert default_catalog() is default_catalog()


def test_resolve_params_fills_defaults_and_normalizes_ints() -> None:
    catalog = default_catalog()

    assert catalog.resolve_params("ma.sma", []) == (20,)
    assert catalog.resolve_params("MA.SMA", [5.0]) == (5,)
    assert catalog.resolve_params("ma.kama", [10]) == (10, 2, 30)
    assert catalog.resolve_params("momentum.macd_signal", [3, 7]) == (3, 7, 9)


@pytest.mark.parametrize("params", [[0], [2.5], [True], ["5"], [5, 6]])
def test_resolve_params_rejects_invalid_values(params: list[object]) -> None:
    with pytest.raises(InvalidParameterError):
        default_catalog().resolve_params("ma.sma", params)


def test_unknown_indicator_has_stable_code() -> None:
    with pytest.raises(UnknownIndicatorError) as exc_info:
        default_catalog().get_def("ma.hull")

    assert exc_info.value.to_payload() == {
        "error": {
            "code": "unknown_indicator",
            "message": "unknown indicator_id: ma.hull",
            "details": {"indicator_id": "ma.hull"},
        }
    }
    assert "ma.hull" not in default_catalog()
    assert "ma.sma" in default_catalog()


def test_create_builds_fresh_source_with_defaults() -> None:
    series = _series(25)
    catalog = default_catalog()

    first = catalog.create("ma.sma", series)
    second = catalog.create("ma.sma", series)

    assert first is not second
    assert first.value_at(18).value is None
    assert first.value_at(19).value == pytest.approx(sum(10.5 + i for i in range(20)) / 20)


def test_custom_catalog_rejects_duplicates_and_required_params() -> None:
    definition = IndicatorDef(
        indicator_id=IndicatorId("custom.lag"),
        title="Lag",
        params=(ParamDef(name="window", kind=ParamKind.INT, hard_min=1),),
        factory=lambda series, window: None,
    )

    with pytest.raises(ValueError, match="duplicate"):
        IndicatorCatalog(defs=[definition, definition])

    catalog = IndicatorCatalog(defs=[definition])
    with pytest.raises(InvalidParameterError, match="requires param window"):
        catalog.resolve_params("custom.lag", [])


def test_indicator_id_normalization() -> None:
    assert IndicatorId(" MA.SMA ").value == "ma.sma"
    with pytest.raises(ValueError):
        IndicatorId("ma-sma")
