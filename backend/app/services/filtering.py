from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta, tzinfo
from typing import Callable, Iterable

from app.models.enums import DateRange, TradeDirection, TradeResult, WeekStart
from app.services.normalization import JournalTrade

ALL = "all"

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class FilterCriteria:
    date_range: DateRange = DateRange.ALL
    asset: str = ALL
    result: TradeResult | str = ALL
    direction: TradeDirection | str = ALL


def system_clock() -> datetime:
    return datetime.now().astimezone()


def clock_for(tz: tzinfo | None) -> Clock:
    if tz is None:
        return system_clock
    return lambda: datetime.now(tz)


def _midnight(day, now: datetime) -> datetime:
    return datetime.combine(day, time.min, tzinfo=now.tzinfo)


def range_start(
    date_range: DateRange,
    now: datetime,
    week_starts_on: WeekStart = WeekStart.MONDAY,
) -> datetime | None:
    """Lower bound of ``date_range`` in the timezone of ``now``; ``None`` for all time."""
    today = now.date()
    if date_range == DateRange.TODAY:
        return _midnight(today, now)
    if date_range == DateRange.THIS_WEEK:
        first_weekday = 0 if week_starts_on == WeekStart.MONDAY else 6
        offset = (today.weekday() - first_weekday) % 7
        return _midnight(today - timedelta(days=offset), now)
    if date_range == DateRange.THIS_MONTH:
        return _midnight(today.replace(day=1), now)
    if date_range == DateRange.THIS_YEAR:
        return _midnight(today.replace(month=1, day=1), now)
    return None


def _matches(criterion: str, value: str) -> bool:
    return criterion == ALL or value == criterion


def filter_trades(
    trades: Iterable[JournalTrade],
    criteria: FilterCriteria,
    *,
    clock: Clock = system_clock,
    week_starts_on: WeekStart = WeekStart.MONDAY,
) -> list[JournalTrade]:
    now = clock()
    if now.tzinfo is None:
        # Naive readings are process-local time.
        now = now.astimezone()
    start = range_start(DateRange(criteria.date_range), now, week_starts_on)
    return [
        trade
        for trade in trades
        if (start is None or trade.date >= start)
        and _matches(criteria.asset, trade.asset)
        and _matches(criteria.result, trade.result)
        and _matches(criteria.direction, trade.direction)
    ]


def unique_assets(trades: Iterable[JournalTrade]) -> list[str]:
    return list(dict.fromkeys(trade.asset for trade in trades))
