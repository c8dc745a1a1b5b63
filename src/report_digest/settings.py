from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReportSettings(BaseSettings):
    # Fan-out bound when several report files are loaded at once
    MAX_CONCURRENT_LOADS: int = Field(default=8, ge=1)

    # CLI behaviour
    LOG_LEVEL: str = "WARNING"
    OUTPUT_FORMAT: Literal["json", "yaml", "table"] = "json"

    model_config = SettingsConfigDict(env_prefix="REPORT_DIGEST_", case_sensitive=False)


__all__ = ["ReportSettings"]
