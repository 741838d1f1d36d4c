from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.models.enums import WeekStart, WinRateDenominator


class Settings(BaseSettings):
    app_name: str = "Trade Journal"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/tradej"
    # None means the timezone of the server process.
    default_timezone: str | None = None
    week_starts_on: WeekStart = WeekStart.MONDAY
    win_rate_denominator: WinRateDenominator = WinRateDenominator.ALL_TRADES
    include_weekends: bool = False
    share_token_ttl_minutes: int = 10

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
