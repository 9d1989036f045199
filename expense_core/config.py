"""Runtime settings for the expense tracker front-ends.

Values come from ``EXPENSE_TRACKER_*`` environment variables or a local
``.env`` file; command line flags override them.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .storage import DEFAULT_FILE_NAME


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: Path = Field(default=Path("data"), description="Directory holding the expenses file")
    file_name: str = Field(default=DEFAULT_FILE_NAME, description="Name of the expenses file")
    currency_symbol: str = Field(default="$", description="Prefix used when rendering amounts")
    log_level: str = Field(default="WARNING", description="Minimum level for log output")
    log_json: bool = Field(default=False, description="Render log lines as JSON")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.strip().upper()


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings; call ``get_settings.cache_clear()`` to reload."""
    return Settings()
