from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user_id, get_db
from app.core.config import Settings, get_settings
from app.models import UserSetting
from app.schemas.settings import SettingsRead, SettingsUpdate
from app.services.journal import get_user_setting
from app.services.normalization import resolve_timezone

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=SettingsRead)
async def get_user_settings(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SettingsRead:
    setting = await get_user_setting(db, user_id)
    if setting is None:
        setting = UserSetting(
            user_id=user_id,
            timezone=settings.default_timezone,
            week_starts_on=settings.week_starts_on,
        )
        db.add(setting)
        await db.commit()
        await db.refresh(setting)
    return SettingsRead(timezone=setting.timezone, week_starts_on=setting.week_starts_on)


@router.patch("", response_model=SettingsRead)
async def update_user_settings(
    payload: SettingsUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SettingsRead:
    setting = await get_user_setting(db, user_id)
    existing_timezone = setting.timezone if setting else settings.default_timezone
    existing_week_start = setting.week_starts_on if setting else settings.week_starts_on

    # A timezone sent as null falls back to the server default.
    timezone = payload.timezone if "timezone" in payload.model_fields_set else existing_timezone
    week_starts_on = payload.week_starts_on or existing_week_start
    # Raises TradeValidationError for names the tz database does not know.
    resolve_timezone(timezone)

    if setting is None:
        setting = UserSetting(user_id=user_id, timezone=timezone, week_starts_on=week_starts_on)
        db.add(setting)
    else:
        setting.timezone = timezone
        setting.week_starts_on = week_starts_on
    await db.commit()
    await db.refresh(setting)
    return SettingsRead(timezone=setting.timezone, week_starts_on=setting.week_starts_on)
