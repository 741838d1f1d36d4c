from __future__ import annotations

from enum import Enum as PyEnum


class TradeDirection(str, PyEnum):
    BUY = "Buy"
    SELL = "Sell"


class TradeResult(str, PyEnum):
    WIN = "Win"
    LOSS = "Loss"
    BREAKEVEN = "BE"


class DateRange(str, PyEnum):
    ALL = "all"
    TODAY = "today"
    THIS_WEEK = "this-week"
    THIS_MONTH = "this-month"
    THIS_YEAR = "this-year"


class WeekStart(str, PyEnum):
    MONDAY = "monday"
    SUNDAY = "sunday"


class WinRateDenominator(str, PyEnum):
    ALL_TRADES = "all_trades"
    DECISIVE_TRADES = "decisive_trades"
