from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_clock_factory, get_current_user_id, get_db, get_filter_criteria
from app.api.routes.stats import serialize_statistics
from app.core.config import Settings, get_settings
from app.models import ShareToken
from app.schemas.share import SharedJournal, ShareTokenRead
from app.schemas.trade import TradeRead
from app.services.filtering import FilterCriteria, filter_trades, unique_assets
from app.services.journal import journal_preferences, load_user_trades
from app.services.statistics import aggregate_statistics

router = APIRouter(prefix="/api/share", tags=["share"])

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@router.post("", response_model=ShareTokenRead, status_code=status.HTTP_201_CREATED)
async def create_share_token(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ShareTokenRead:
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.share_token_ttl_minutes)
    share_token = ShareToken(user_id=user_id, token=secrets.token_urlsafe(24), expires_at=expires_at)
    db.add(share_token)
    await db.commit()
    logger.info("Issued share token for user %s, expires %s", user_id, expires_at.isoformat())
    return ShareTokenRead(token=share_token.token, expires_at=expires_at)


@router.get("/{token}", response_model=SharedJournal)
async def get_shared_journal(
    token: str,
    criteria: FilterCriteria = Depends(get_filter_criteria),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    clock_factory=Depends(get_clock_factory),
) -> SharedJournal:
    result = await db.execute(select(ShareToken).where(ShareToken.token == token))
    share_token = result.scalar_one_or_none()
    if share_token is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Share link not found")
    if _as_utc(share_token.expires_at) <= datetime.now(timezone.utc):
        logger.warning("Expired share token used for user %s", share_token.user_id)
        raise HTTPException(status_code=status.HTTP_410_GONE, detail="Share link has expired")

    user_id = share_token.user_id
    tz, week_starts_on = await journal_preferences(db, user_id, settings)
    trades = await load_user_trades(db, user_id, tz)
    filtered = filter_trades(trades, criteria, clock=clock_factory(tz), week_starts_on=week_starts_on)
    statistics = aggregate_statistics(
        filtered,
        win_rate_denominator=settings.win_rate_denominator,
        include_weekends=settings.include_weekends,
    )
    return SharedJournal(
        user_id=user_id,
        assets=unique_assets(trades),
        trades=[TradeRead.model_validate(trade, from_attributes=True) for trade in filtered],
        statistics=serialize_statistics(statistics),
    )
