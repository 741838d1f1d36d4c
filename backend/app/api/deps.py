from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import tzinfo
from typing import Callable

from fastapi import Header, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_session
from app.models.enums import DateRange
from app.services.filtering import ALL, Clock, FilterCriteria, clock_for


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


async def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    # Authentication happens upstream; the gateway forwards the verified user id.
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing user identity")
    return x_user_id


def get_clock_factory() -> Callable[[tzinfo | None], Clock]:
    return clock_for


def get_filter_criteria(
    date_range: DateRange = Query(default=DateRange.ALL),
    asset: str = Query(default=ALL),
    result: str = Query(default=ALL),
    direction: str = Query(default=ALL),
) -> FilterCriteria:
    return FilterCriteria(date_range=date_range, asset=asset, result=result, direction=direction)
