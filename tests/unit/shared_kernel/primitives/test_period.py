from __future__ import annotations

from datetime import datetime, timezone

import pytest

from tickquant.shared_kernel.primitives import Period, UtcTimestamp


def _ts(*args: int) -> UtcTimestamp:
    return UtcTimestamp(datetime(*args, tzinfo=timezone.utc))


def test_periods_are_totally_ordered_from_second_to_month() -> None:
    ordered = [
        Period.SECOND,
        Period.MINUTE,
        Period.MINUTE_15,
        Period.MINUTE_30,
        Period.HOUR,
        Period.HOUR_2,
        Period.DAY,
        Period.WEEK,
        Period.MONTH,
    ]
    assert sorted(reversed(ordered)) == ordered
    assert Period.DAY < Period.WEEK
    assert Period.MONTH >= Period.WEEK
    assert Period.WEEK.is_coarser_than(Period.DAY)
    assert not Period.DAY.is_coarser_than(Period.DAY)


@pytest.mark.parametrize(
    ("code", "expected"),
    [("1m", Period.MINUTE), ("15m", Period.MINUTE_15), ("1mo", Period.MONTH), ("day", Period.DAY)],
)
def test_parse_accepts_codes_and_names(code: str, expected: Period) -> None:
    assert Period.parse(code) is expected


def test_parse_rejects_unknown_code() -> None:
    with pytest.raises(ValueError, match="Unsupported period"):
        Period.parse("3h")


def test_bucket_open_aligns_calendar_and_epoch_periods() -> None:
    """
    Verify bucket alignment for sub-week, week and month periods.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        2024-05-15 is a Wednesday; the week bucket opens on Monday 2024-05-13.
    Raises:
        AssertionError: If alignment rules regress.
    Side Effects:
        None.
    """
    ts = _ts(2024, 5, 15, 13, 47, 12)
    assert Period.MINUTE_15.bucket_open(ts) == _ts(2024, 5, 15, 13, 45)
    assert Period.HOUR_2.bucket_open(ts) == _ts(2024, 5, 15, 12)
    assert Period.DAY.bucket_open(ts) == _ts(2024, 5, 15)
    assert Period.WEEK.bucket_open(ts) == _ts(2024, 5, 13)
    assert Period.MONTH.bucket_open(ts) == _ts(2024, 5, 1)
