"""
Runtime configuration for the analytics engine.

Values are read from ``FITARC_*`` environment variables (or a local ``.env``)
and only supply defaults: every selector also accepts explicit overrides.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyticsSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FITARC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    volume_window_days: int = Field(default=28, ge=1, description="Weekly volume summary window")
    movement_window_days: int = Field(default=30, ge=1, description="Movement balance summary window")
    trend_points: int = Field(default=5, ge=1, description="Snapshots per lift in strength trends")
    lift_history_points: int = Field(default=12, ge=1, description="Snapshots in a lift history view")
    rep_history_points: int = Field(default=4, ge=0, description="Rows in a lift's rep history")
    time_zone: str = Field(default="UTC", description="IANA zone for session dates and 'today'")
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)


settings = AnalyticsSettings()
