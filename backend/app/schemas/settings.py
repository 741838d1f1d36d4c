from __future__ import annotations

from pydantic import BaseModel

from app.models.enums import WeekStart


class SettingsRead(BaseModel):
    timezone: str | None = None
    week_starts_on: WeekStart = WeekStart.MONDAY


class SettingsUpdate(BaseModel):
    timezone: str | None = None
    week_starts_on: WeekStart | None = None
