from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_clock_factory, get_current_user_id, get_db, get_filter_criteria
from app.core.config import Settings, get_settings
from app.schemas.stats import StatisticsRead
from app.services.filtering import FilterCriteria
from app.services.journal import journal_preferences, load_user_trades
from app.services.statistics import StatisticsResult, compute_statistics

router = APIRouter(prefix="/api/stats", tags=["stats"])


def serialize_statistics(result: StatisticsResult) -> StatisticsRead:
    return StatisticsRead.model_validate(result, from_attributes=True)


@router.get("", response_model=StatisticsRead)
async def get_statistics(
    criteria: FilterCriteria = Depends(get_filter_criteria),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    clock_factory=Depends(get_clock_factory),
) -> StatisticsRead:
    tz, week_starts_on = await journal_preferences(db, user_id, settings)
    trades = await load_user_trades(db, user_id, tz)
    result = compute_statistics(
        trades,
        criteria,
        clock=clock_factory(tz),
        week_starts_on=week_starts_on,
        win_rate_denominator=settings.win_rate_denominator,
        include_weekends=settings.include_weekends,
    )
    return serialize_statistics(result)
