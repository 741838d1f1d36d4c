from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Sequence

from app.models.enums import TradeResult, WeekStart, WinRateDenominator
from app.services.filtering import Clock, FilterCriteria, filter_trades, system_clock
from app.services.normalization import JournalTrade

WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

WIN_LOSS_BUCKETS = (
    (TradeResult.WIN, "Wins", "hsl(var(--chart-2))"),
    (TradeResult.LOSS, "Losses", "hsl(var(--destructive))"),
    (TradeResult.BREAKEVEN, "Break Even", "hsl(var(--muted-foreground))"),
)


@dataclass(frozen=True)
class PerformancePoint:
    label: str
    date: datetime
    cumulative_pnl: float


@dataclass(frozen=True)
class DistributionBucket:
    name: str
    value: int
    fill: str


@dataclass(frozen=True)
class WeekdayBucket:
    name: str
    pnl: float


@dataclass(frozen=True)
class StatisticsResult:
    total_pnl: float = 0.0
    win_rate: float = 0.0
    winning_trades: int = 0
    losing_trades: int = 0
    be_trades: int = 0
    total_trades: int = 0
    total_reward: float = 0.0
    total_risk: float = 0.0
    average_reward: float = 0.0
    average_risk: float = 0.0
    rr_ratio: float = 0.0
    avg_pnl: float = 0.0
    best_trade: JournalTrade | None = None
    worst_trade: JournalTrade | None = None
    performance_data: tuple[PerformancePoint, ...] = ()
    win_loss_data: tuple[DistributionBucket, ...] = ()
    weekday_performance: tuple[WeekdayBucket, ...] = ()


def _pnl(trade: JournalTrade) -> float:
    return trade.pnl if trade.pnl is not None else 0.0


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def _win_loss_data(counts: dict[TradeResult, int]) -> tuple[DistributionBucket, ...]:
    return tuple(
        DistributionBucket(name=name, value=counts[result], fill=fill)
        for result, name, fill in WIN_LOSS_BUCKETS
    )


def _weekday_performance(trades: Sequence[JournalTrade], include_weekends: bool) -> tuple[WeekdayBucket, ...]:
    names = WEEKDAY_NAMES if include_weekends else WEEKDAY_NAMES[:5]
    totals = [0.0] * len(names)
    for trade in trades:
        day = trade.date.weekday()
        if day < len(names):
            totals[day] += _pnl(trade)
    return tuple(WeekdayBucket(name=name, pnl=total) for name, total in zip(names, totals))


def _performance_data(trades: Sequence[JournalTrade]) -> tuple[PerformancePoint, ...]:
    points: list[PerformancePoint] = []
    cumulative = 0.0
    # sorted() is stable, so trades sharing a date keep their input order.
    for index, trade in enumerate(sorted(trades, key=lambda item: item.date), start=1):
        cumulative += _pnl(trade)
        points.append(PerformancePoint(label=f"Trade #{index}", date=trade.date, cumulative_pnl=cumulative))
    return tuple(points)


def aggregate_statistics(
    trades: Iterable[JournalTrade],
    *,
    win_rate_denominator: WinRateDenominator = WinRateDenominator.ALL_TRADES,
    include_weekends: bool = False,
) -> StatisticsResult:
    """
    Compute the dashboard statistics for ``trades``.

    ``pnl`` is taken as recorded; prices are only used for the reward and risk
    distances behind the R:R ratio. Missing numbers count as zero, so the
    function returns for any list of trades, including an empty one.
    """
    trades = list(trades)
    counts = {result: 0 for result in TradeResult}
    if not trades:
        return StatisticsResult(
            win_loss_data=_win_loss_data(counts),
            weekday_performance=_weekday_performance((), include_weekends),
        )

    total_pnl = 0.0
    total_reward = 0.0
    total_risk = 0.0
    best_trade = worst_trade = trades[0]

    for trade in trades:
        counts[trade.result] += 1
        pnl = _pnl(trade)
        total_pnl += pnl
        if pnl > _pnl(best_trade):
            best_trade = trade
        if pnl < _pnl(worst_trade):
            worst_trade = trade

        if trade.result == TradeResult.WIN and trade.take_profit is not None and trade.entry_price is not None:
            total_reward += abs(trade.take_profit - trade.entry_price)
        elif trade.result == TradeResult.LOSS and trade.entry_price is not None and trade.stop_loss is not None:
            total_risk += abs(trade.entry_price - trade.stop_loss)

    total_trades = len(trades)
    winning = counts[TradeResult.WIN]
    losing = counts[TradeResult.LOSS]

    if win_rate_denominator == WinRateDenominator.DECISIVE_TRADES:
        win_rate = _ratio(winning, winning + losing) * 100
    else:
        win_rate = _ratio(winning, total_trades) * 100

    average_reward = _ratio(total_reward, winning)
    average_risk = _ratio(total_risk, losing)

    return StatisticsResult(
        total_pnl=total_pnl,
        win_rate=win_rate,
        winning_trades=winning,
        losing_trades=losing,
        be_trades=counts[TradeResult.BREAKEVEN],
        total_trades=total_trades,
        total_reward=total_reward,
        total_risk=total_risk,
        average_reward=average_reward,
        average_risk=average_risk,
        rr_ratio=_ratio(average_reward, average_risk),
        avg_pnl=total_pnl / total_trades,
        best_trade=best_trade,
        worst_trade=worst_trade,
        performance_data=_performance_data(trades),
        win_loss_data=_win_loss_data(counts),
        weekday_performance=_weekday_performance(trades, include_weekends),
    )


def compute_statistics(
    trades: Iterable[JournalTrade],
    criteria: FilterCriteria,
    *,
    clock: Clock = system_clock,
    week_starts_on: WeekStart = WeekStart.MONDAY,
    win_rate_denominator: WinRateDenominator = WinRateDenominator.ALL_TRADES,
    include_weekends: bool = False,
) -> StatisticsResult:
    filtered = filter_trades(trades, criteria, clock=clock, week_starts_on=week_starts_on)
    return aggregate_statistics(
        filtered,
        win_rate_denominator=win_rate_denominator,
        include_weekends=include_weekends,
    )
