from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ATTENDANCE_TIMEZONE = "Asia/Seoul"


class Settings(BaseSettings):
    app_name: str = "Timecard"
    attendance_timezone: str = DEFAULT_ATTENDANCE_TIMEZONE
    cors_allow_origins: str = "http://127.0.0.1:5173,http://localhost:5173"
    log_level: str = "INFO"
    holiday_standard_minutes: int = 480

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_cors_origins() -> list[str]:
    raw = get_settings().cors_allow_origins
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_attendance_timezone() -> ZoneInfo:
    raw_name = (get_settings().attendance_timezone or "").strip() or DEFAULT_ATTENDANCE_TIMEZONE
    try:
        return ZoneInfo(raw_name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo(DEFAULT_ATTENDANCE_TIMEZONE)
