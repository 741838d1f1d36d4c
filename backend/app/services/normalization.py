from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone as dt_timezone, tzinfo
from typing import Any, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.models.enums import TradeDirection, TradeResult


class TradeValidationError(Exception):
    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        if field is not None:
            super().__init__(f"{field}: {message}")
        else:
            super().__init__(message)


@dataclass
class JournalTrade:
    date: datetime
    asset: str
    direction: TradeDirection
    result: TradeResult
    pnl: float | None = None
    entry_price: float | None = None
    stop_loss: float | None = None
    take_profit: float | None = None
    id: int | str | None = None
    user_id: str | None = None
    notes: str | None = None
    screenshot_url: str | None = None
    post_analysis: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.date, datetime) or self.date.tzinfo is None:
            raise TradeValidationError(f"must be a timezone-aware datetime, got {self.date!r}", "date")
        self.direction = _coerce_enum(TradeDirection, self.direction, "direction")
        self.result = _coerce_enum(TradeResult, self.result, "result")


# Keys used by the document store of the first journal release.
_RECORD_ALIASES = {
    "entryPrice": "entry_price",
    "stopLoss": "stop_loss",
    "takeProfit": "take_profit",
    "screenshotUrl": "screenshot_url",
    "postAnalysis": "post_analysis",
    "userId": "user_id",
}

_NUMERIC_FIELDS = ("pnl", "entry_price", "stop_loss", "take_profit")
_TEXT_FIELDS = ("notes", "screenshot_url", "post_analysis", "user_id")


def _coerce_enum(enum_cls, value: Any, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise TradeValidationError(f"unrecognized value {value!r} (expected one of {allowed})", field_name) from exc


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Return the zone for ``name``; ``None`` stands for the process-local timezone."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise TradeValidationError(f"unknown timezone {name!r}", "timezone") from exc


def localize(value: datetime, tz: tzinfo | None) -> datetime:
    if tz is None:
        # astimezone() without an argument treats naive values as local time.
        return value.astimezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def normalize_trade_date(value: Any, tz: tzinfo | None) -> datetime:
    """
    Convert a stored trade date into the canonical aware datetime.

    Accepts datetimes, dates and ISO-8601 strings. Naive values are taken to be
    in ``tz``; date-only values mean midnight of that day.
    """
    if isinstance(value, datetime):
        return localize(value, tz)
    if isinstance(value, date):
        return localize(datetime.combine(value, time.min), tz)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise TradeValidationError(f"invalid ISO-8601 date {value!r}", "date") from exc
        return localize(parsed, tz)
    raise TradeValidationError(f"unsupported date value {value!r}", "date")


def _parse_number(value: Any, field_name: str) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise TradeValidationError(f"must be a number, got {value!r}", field_name) from exc


def trade_from_record(record: Mapping[str, Any], tz: tzinfo | None) -> JournalTrade:
    """Build a trade from a raw document-store or JSON record."""
    data = {_RECORD_ALIASES.get(key, key): value for key, value in record.items()}

    for required in ("date", "result", "direction"):
        if data.get(required) in (None, ""):
            raise TradeValidationError("is required", required)

    trade_date = normalize_trade_date(data.pop("date"), tz)
    result = _coerce_enum(TradeResult, data.pop("result"), "result")
    direction = _coerce_enum(TradeDirection, data.pop("direction"), "direction")
    numbers = {name: _parse_number(data.pop(name, None), name) for name in _NUMERIC_FIELDS}
    texts = {name: data.pop(name, None) for name in _TEXT_FIELDS}
    trade_id = data.pop("id", None)
    asset = str(data.pop("asset", "") or "")

    return JournalTrade(
        id=trade_id,
        date=trade_date,
        asset=asset,
        direction=direction,
        result=result,
        extra=data,
        **numbers,
        **texts,
    )


def trade_from_model(model: Any, tz: tzinfo | None) -> JournalTrade:
    """Build a trade from a stored ``Trade`` row. Stored timestamps are UTC."""
    stored = model.date
    if stored.tzinfo is None:
        stored = stored.replace(tzinfo=dt_timezone.utc)

    def _float(value: Any) -> float | None:
        return float(value) if value is not None else None

    extra: dict[str, Any] = {}
    if model.lot_size is not None:
        extra["lot_size"] = float(model.lot_size)

    return JournalTrade(
        id=model.id,
        date=localize(stored, tz),
        asset=model.asset,
        direction=model.direction,
        result=model.result,
        pnl=_float(model.pnl),
        entry_price=_float(model.entry_price),
        stop_loss=_float(model.stop_loss),
        take_profit=_float(model.take_profit),
        user_id=model.user_id,
        notes=model.notes,
        screenshot_url=model.screenshot_url,
        post_analysis=model.post_analysis,
        extra=extra,
    )
