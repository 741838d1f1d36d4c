from app.models.enums import DateRange, TradeDirection, TradeResult, WeekStart, WinRateDenominator
from app.models.share_token import ShareToken
from app.models.trade import Trade
from app.models.user_setting import UserSetting

__all__ = [
    "DateRange",
    "ShareToken",
    "Trade",
    "TradeDirection",
    "TradeResult",
    "UserSetting",
    "WeekStart",
    "WinRateDenominator",
]
