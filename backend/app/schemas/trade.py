from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from app.models.enums import TradeDirection, TradeResult


class TradeBase(BaseModel):
    date: datetime
    asset: str = Field(min_length=1, max_length=50)
    direction: TradeDirection
    entry_price: float = Field(gt=0)
    stop_loss: float = Field(gt=0)
    take_profit: float = Field(gt=0)
    result: TradeResult
    pnl: float | None = None
    lot_size: float | None = Field(default=None, gt=0)
    notes: str | None = None
    screenshot_url: HttpUrl | None = None


class TradeCreate(TradeBase):
    pass


class TradeUpdate(BaseModel):
    date: datetime | None = None
    asset: str | None = Field(default=None, min_length=1, max_length=50)
    direction: TradeDirection | None = None
    entry_price: float | None = Field(default=None, gt=0)
    stop_loss: float | None = Field(default=None, gt=0)
    take_profit: float | None = Field(default=None, gt=0)
    result: TradeResult | None = None
    pnl: float | None = None
    lot_size: float | None = Field(default=None, gt=0)
    notes: str | None = None
    screenshot_url: HttpUrl | None = None
    post_analysis: str | None = None


class TradeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int | str | None
    date: datetime
    asset: str
    direction: TradeDirection
    entry_price: float | None
    stop_loss: float | None
    take_profit: float | None
    result: TradeResult
    pnl: float | None
    notes: str | None = None
    screenshot_url: str | None = None
    post_analysis: str | None = None
    extra: dict[str, Any] = Field(default_factory=dict)
