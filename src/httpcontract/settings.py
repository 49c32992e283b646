from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ContractSettings(BaseSettings, frozen=True):
    """Parser settings; read from HTTPCONTRACT_* environment variables and .env."""

    model_config = SettingsConfigDict(
        env_prefix="HTTPCONTRACT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(default="WARNING", description="Level used by the CLI log handler")
    default_style: Literal["auto", "verb", "request-line"] = Field(
        default="auto", description="Annotation vocabulary; auto detects it per interface"
    )
    decode_queries: bool = Field(
        default=True, description="Form-url-decode query literals found in paths"
    )
