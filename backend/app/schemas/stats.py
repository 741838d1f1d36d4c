from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.schemas.trade import TradeRead


class PerformancePointRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    label: str
    date: datetime
    cumulative_pnl: float


class DistributionBucketRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    name: str
    value: int
    fill: str


class WeekdayBucketRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    name: str
    pnl: float


class StatisticsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    total_pnl: float
    win_rate: float
    winning_trades: int
    losing_trades: int
    be_trades: int
    total_trades: int
    total_reward: float
    total_risk: float
    average_reward: float
    average_risk: float
    rr_ratio: float
    avg_pnl: float
    best_trade: TradeRead | None
    worst_trade: TradeRead | None
    performance_data: list[PerformancePointRead]
    win_loss_data: list[DistributionBucketRead]
    weekday_performance: list[WeekdayBucketRead]
