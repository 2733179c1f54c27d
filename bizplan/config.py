"""Application settings using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Application
    # ==========================================================================
    app_name: str = "Business Plan Generator"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # ==========================================================================
    # Database
    # ==========================================================================
    database_url: str = Field(default="sqlite+aiosqlite:///./bizplan.db")
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # ==========================================================================
    # Completion service (OpenRouter, OpenAI-compatible)
    # ==========================================================================
    openrouter_api_key: str = Field(default="", repr=False)
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_model: str = "deepseek/deepseek-r1:free"
    openrouter_site_url: str | None = None
    openrouter_site_name: str | None = None

    generation_max_tokens: int = Field(default=500, gt=0)
    generation_timeout_seconds: float = Field(default=30.0, gt=0)
    generation_max_retries: int = Field(default=0, ge=0)
    generation_retry_backoff_seconds: float = Field(default=1.0, ge=0)

    # ==========================================================================
    # Prompt
    # ==========================================================================
    # targetMarket / usps stay out of the prompt unless explicitly enabled
    prompt_include_market_details: bool = False

    # ==========================================================================
    # API
    # ==========================================================================
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    cors_origins: list[str] = Field(default=["*"])

    # ==========================================================================
    # Client
    # ==========================================================================
    api_base_url: str = "http://localhost:3000"
    cache_path: Path = Field(default=Path.home() / ".bizplan" / "last_plan.json")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
