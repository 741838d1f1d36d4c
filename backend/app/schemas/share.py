from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from app.schemas.stats import StatisticsRead
from app.schemas.trade import TradeRead


class ShareTokenRead(BaseModel):
    token: str
    expires_at: datetime


class SharedJournal(BaseModel):
    user_id: str
    assets: list[str]
    trades: list[TradeRead]
    statistics: StatisticsRead
