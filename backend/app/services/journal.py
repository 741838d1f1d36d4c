from __future__ import annotations

import logging
from datetime import tzinfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.models import Trade, TradeResult, UserSetting, WeekStart
from app.services.normalization import JournalTrade, resolve_timezone, trade_from_model

logger = logging.getLogger(__name__)


def derive_pnl(
    result: TradeResult,
    entry_price: float,
    stop_loss: float,
    take_profit: float,
) -> float:
    """P/L recorded when the trader leaves it blank: the planned price distance."""
    if result == TradeResult.WIN:
        return abs(take_profit - entry_price)
    if result == TradeResult.LOSS:
        return -abs(entry_price - stop_loss)
    return 0.0


async def get_user_setting(session: AsyncSession, user_id: str) -> UserSetting | None:
    result = await session.execute(select(UserSetting).where(UserSetting.user_id == user_id))
    return result.scalar_one_or_none()


async def journal_preferences(
    session: AsyncSession,
    user_id: str,
    settings: Settings,
) -> tuple[tzinfo | None, WeekStart]:
    setting = await get_user_setting(session, user_id)
    timezone = setting.timezone if setting and setting.timezone else settings.default_timezone
    week_starts_on = setting.week_starts_on if setting else settings.week_starts_on
    return resolve_timezone(timezone), week_starts_on


async def load_user_trades(session: AsyncSession, user_id: str, tz: tzinfo | None) -> list[JournalTrade]:
    stmt = select(Trade).where(Trade.user_id == user_id).order_by(Trade.date.desc(), Trade.id.desc())
    result = await session.execute(stmt)
    trades = [trade_from_model(row, tz) for row in result.scalars().all()]
    logger.debug("Loaded %d trades for user %s", len(trades), user_id)
    return trades
