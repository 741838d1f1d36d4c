from __future__ import annotations

import logging
from datetime import timezone, tzinfo

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_clock_factory, get_current_user_id, get_db, get_filter_criteria
from app.core.config import Settings, get_settings
from app.models import Trade
from app.schemas.trade import TradeCreate, TradeRead, TradeUpdate
from app.services.filtering import FilterCriteria, filter_trades, unique_assets
from app.services.journal import derive_pnl, journal_preferences, load_user_trades
from app.services.normalization import JournalTrade, normalize_trade_date, trade_from_model

router = APIRouter(prefix="/api/trades", tags=["trades"])

logger = logging.getLogger(__name__)


def _serialize_trade(trade: JournalTrade) -> TradeRead:
    return TradeRead.model_validate(trade, from_attributes=True)


def _stored_date(value, tz: tzinfo | None):
    return normalize_trade_date(value, tz).astimezone(timezone.utc)


async def _get_owned_trade(db: AsyncSession, trade_id: int, user_id: str) -> Trade:
    trade = await db.get(Trade, trade_id)
    if trade is None or trade.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trade not found")
    return trade


@router.get("", response_model=list[TradeRead])
async def list_trades(
    criteria: FilterCriteria = Depends(get_filter_criteria),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    clock_factory=Depends(get_clock_factory),
) -> list[TradeRead]:
    tz, week_starts_on = await journal_preferences(db, user_id, settings)
    trades = await load_user_trades(db, user_id, tz)
    filtered = filter_trades(trades, criteria, clock=clock_factory(tz), week_starts_on=week_starts_on)
    return [_serialize_trade(trade) for trade in filtered]


@router.get("/assets", response_model=list[str])
async def list_assets(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> list[str]:
    tz, _ = await journal_preferences(db, user_id, settings)
    return unique_assets(await load_user_trades(db, user_id, tz))


@router.post("", response_model=TradeRead, status_code=status.HTTP_201_CREATED)
async def create_trade(
    payload: TradeCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TradeRead:
    tz, _ = await journal_preferences(db, user_id, settings)
    pnl = payload.pnl
    if pnl is None:
        pnl = derive_pnl(payload.result, payload.entry_price, payload.stop_loss, payload.take_profit)

    trade = Trade(
        user_id=user_id,
        date=_stored_date(payload.date, tz),
        asset=payload.asset,
        direction=payload.direction,
        entry_price=payload.entry_price,
        stop_loss=payload.stop_loss,
        take_profit=payload.take_profit,
        result=payload.result,
        pnl=pnl,
        lot_size=payload.lot_size,
        notes=payload.notes,
        screenshot_url=str(payload.screenshot_url) if payload.screenshot_url else None,
    )
    db.add(trade)
    await db.commit()
    await db.refresh(trade)
    logger.info("User %s logged trade %s on %s", user_id, trade.id, trade.asset)
    return _serialize_trade(trade_from_model(trade, tz))


@router.patch("/{trade_id}", response_model=TradeRead)
async def update_trade(
    trade_id: int,
    payload: TradeUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TradeRead:
    tz, _ = await journal_preferences(db, user_id, settings)
    trade = await _get_owned_trade(db, trade_id, user_id)

    changes = payload.model_dump(exclude_unset=True)
    if "date" in changes:
        if changes["date"] is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="date cannot be cleared")
        changes["date"] = _stored_date(changes["date"], tz)
    if changes.get("screenshot_url") is not None:
        changes["screenshot_url"] = str(changes["screenshot_url"])
    for required in ("asset", "direction", "result"):
        if required in changes and changes[required] is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{required} cannot be cleared")

    sent_pnl = "pnl" in changes
    explicit_pnl = changes.pop("pnl", None)
    # A pnl sent as null asks for it to be derived from the prices again.
    pnl_cleared = sent_pnl and explicit_pnl is None
    for name, value in changes.items():
        setattr(trade, name, value)

    price_fields = {"result", "entry_price", "stop_loss", "take_profit"}
    prices_changed = bool(price_fields & changes.keys())
    if explicit_pnl is not None:
        trade.pnl = explicit_pnl
    elif pnl_cleared or prices_changed:
        if None not in (trade.entry_price, trade.stop_loss, trade.take_profit):
            trade.pnl = derive_pnl(
                trade.result, float(trade.entry_price), float(trade.stop_loss), float(trade.take_profit)
            )

    await db.commit()
    await db.refresh(trade)
    return _serialize_trade(trade_from_model(trade, tz))


@router.delete("/{trade_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_trade(
    trade_id: int,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> Response:
    trade = await _get_owned_trade(db, trade_id, user_id)
    await db.delete(trade)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_all_trades(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await db.execute(delete(Trade).where(Trade.user_id == user_id))
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
