from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from app.models.enums import DateRange, TradeDirection, TradeResult, WeekStart
from app.services.filtering import FilterCriteria, clock_for, filter_trades, range_start, unique_assets

from conftest import FIXED_NOW


def fixed_clock(now: datetime = FIXED_NOW):
    return lambda: now


@pytest.mark.parametrize(
    ("date_range", "week_starts_on", "expected"),
    [
        (DateRange.TODAY, WeekStart.MONDAY, datetime(2024, 7, 17, tzinfo=timezone.utc)),
        (DateRange.THIS_WEEK, WeekStart.MONDAY, datetime(2024, 7, 15, tzinfo=timezone.utc)),
        (DateRange.THIS_WEEK, WeekStart.SUNDAY, datetime(2024, 7, 14, tzinfo=timezone.utc)),
        (DateRange.THIS_MONTH, WeekStart.MONDAY, datetime(2024, 7, 1, tzinfo=timezone.utc)),
        (DateRange.THIS_YEAR, WeekStart.MONDAY, datetime(2024, 1, 1, tzinfo=timezone.utc)),
        (DateRange.ALL, WeekStart.MONDAY, None),
    ],
)
def test_range_start(date_range, week_starts_on, expected) -> None:
    assert range_start(date_range, FIXED_NOW, week_starts_on) == expected


def test_this_week_on_week_start_day_begins_today() -> None:
    monday = datetime(2024, 7, 15, 8, 0, tzinfo=timezone.utc)
    sunday = datetime(2024, 7, 14, 8, 0, tzinfo=timezone.utc)
    assert range_start(DateRange.THIS_WEEK, monday) == datetime(2024, 7, 15, tzinfo=timezone.utc)
    # A Sunday belongs to the week that started the previous Monday.
    assert range_start(DateRange.THIS_WEEK, sunday) == datetime(2024, 7, 8, tzinfo=timezone.utc)
    assert range_start(DateRange.THIS_WEEK, sunday, WeekStart.SUNDAY) == datetime(2024, 7, 14, tzinfo=timezone.utc)


def test_range_start_uses_timezone_of_now() -> None:
    tokyo = ZoneInfo("Asia/Tokyo")
    now = FIXED_NOW.astimezone(tokyo)  # 2024-07-18 00:30 in Tokyo
    start = range_start(DateRange.TODAY, now)
    assert start == datetime(2024, 7, 18, tzinfo=tokyo)
    assert start.utcoffset() == timedelta(hours=9)


def test_this_week_keeps_only_current_week_in_input_order(make_trade) -> None:
    trades = [
        make_trade("2024-07-16T09:00:00+00:00", pnl=10, asset="A"),
        make_trade("2024-07-03T09:00:00+00:00", pnl=20, asset="B"),
        make_trade("2024-07-15T00:00:00+00:00", pnl=30, asset="C"),
        make_trade("2024-07-10T09:00:00+00:00", pnl=40, asset="D"),
        make_trade("2024-07-17T09:00:00+00:00", pnl=50, asset="E"),
    ]
    filtered = filter_trades(trades, FilterCriteria(date_range=DateRange.THIS_WEEK), clock=fixed_clock())
    assert [trade.asset for trade in filtered] == ["A", "C", "E"]
    assert all(trade.date >= datetime(2024, 7, 15, tzinfo=timezone.utc) for trade in filtered)


def test_future_dated_trades_are_kept(make_trade) -> None:
    future = make_trade("2024-08-01T09:00:00+00:00")
    assert filter_trades([future], FilterCriteria(date_range=DateRange.TODAY), clock=fixed_clock()) == [future]


def test_all_range_keeps_every_trade(make_trade) -> None:
    trades = [make_trade("1999-01-01T00:00:00+00:00"), make_trade("2024-07-17T00:00:00+00:00")]
    assert filter_trades(trades, FilterCriteria(), clock=fixed_clock()) == trades


def test_field_criteria_are_exact_and_combined(make_trade) -> None:
    trades = [
        make_trade(asset="EUR/USD", result=TradeResult.WIN, direction=TradeDirection.BUY, pnl=1),
        make_trade(asset="EUR/USD", result=TradeResult.LOSS, direction=TradeDirection.BUY, pnl=2),
        make_trade(asset="EUR/USD", result=TradeResult.WIN, direction=TradeDirection.SELL, pnl=3),
        make_trade(asset="GOLD", result=TradeResult.WIN, direction=TradeDirection.BUY, pnl=4),
    ]
    criteria = FilterCriteria(asset="EUR/USD", result="Win", direction="Buy")
    assert [trade.pnl for trade in filter_trades(trades, criteria, clock=fixed_clock())] == [1]

    by_result = FilterCriteria(result=TradeResult.WIN)
    assert [trade.pnl for trade in filter_trades(trades, by_result, clock=fixed_clock())] == [1, 3, 4]


def test_criteria_matching_is_case_sensitive(make_trade) -> None:
    trades = [make_trade(asset="EUR/USD", result=TradeResult.WIN)]
    assert filter_trades(trades, FilterCriteria(asset="eur/usd"), clock=fixed_clock()) == []
    assert filter_trades(trades, FilterCriteria(result="win"), clock=fixed_clock()) == []


def test_filter_is_idempotent_and_order_preserving_subset(make_trade) -> None:
    trades = [
        make_trade(f"2024-07-{day:02d}T12:00:00+00:00", pnl=day, asset="GOLD" if day % 2 else "EUR/USD")
        for day in (17, 2, 16, 9, 15, 1, 12)
    ]
    criteria = FilterCriteria(date_range=DateRange.THIS_MONTH, asset="GOLD")
    once = filter_trades(trades, criteria, clock=fixed_clock())
    twice = filter_trades(once, criteria, clock=fixed_clock())

    assert twice == once
    assert all(any(trade is original for original in trades) for trade in once)
    positions = [next(i for i, original in enumerate(trades) if original is trade) for trade in once]
    assert positions == sorted(positions)


def test_filter_does_not_mutate_input(make_trade) -> None:
    trades = [make_trade(asset="A"), make_trade(asset="B")]
    snapshot = list(trades)
    filter_trades(trades, FilterCriteria(asset="B"), clock=fixed_clock())
    assert trades == snapshot


def test_clock_is_read_once_per_call(make_trade) -> None:
    calls = []

    def clock() -> datetime:
        calls.append(1)
        return FIXED_NOW

    filter_trades([make_trade(), make_trade(), make_trade()], FilterCriteria(date_range=DateRange.TODAY), clock=clock)
    assert len(calls) == 1


def test_naive_clock_reading_is_process_local(make_trade) -> None:
    trades = [make_trade("2024-07-16T09:00:00+00:00", asset="A"), make_trade("2023-06-01T09:00:00+00:00", asset="B")]
    naive_now = FIXED_NOW.replace(tzinfo=None)
    filtered = filter_trades(trades, FilterCriteria(date_range=DateRange.THIS_YEAR), clock=lambda: naive_now)
    assert [trade.asset for trade in filtered] == ["A"]


def test_clock_for_timezone() -> None:
    now = clock_for(ZoneInfo("America/New_York"))()
    assert now.tzinfo == ZoneInfo("America/New_York")
    assert clock_for(None)().tzinfo is not None


def test_unique_assets_in_first_seen_order(make_trade) -> None:
    trades = [make_trade(asset=name) for name in ("GOLD", "EUR/USD", "GOLD", "BTC/USD", "EUR/USD")]
    assert unique_assets(trades) == ["GOLD", "EUR/USD", "BTC/USD"]
