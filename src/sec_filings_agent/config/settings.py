# src/sec_filings_agent/config/settings.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""SEC Filings Agent Configuration (Pydantic Settings, v2)

Summary:
    Typed application configuration for the HTTP surface: deployment
    environment, log level and the agent identity reported by ``/healthz``.
    EDGAR transport settings live beside the fetcher in
    ``infrastructure.external_apis.edgar.settings``.

Design:
    - Pydantic v2 BaseSettings with explicit field declarations.
    - Environment enumeration for coarse behavior toggles (includes TEST).
    - Singleton accessor ``get_settings()`` with LRU cache.
    - Safe, structured logging (no secrets).
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from sec_filings_agent.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


class Environment(str, Enum):
    """Logical deployment environment."""

    DEVELOPMENT = "development"
    TEST = "test"
    CI = "ci"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Typed application configuration for the SEC Filings Agent."""

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Logical deployment environment.",
        validation_alias="ENVIRONMENT",
    )
    log_level: str | None = Field(
        default=None,
        description="Override log level (e.g., 'DEBUG', 'INFO'). If not set, defaults are used.",
        validation_alias="LOG_LEVEL",
    )
    agent_name: str = Field(
        default="sec-filings-agent",
        min_length=1,
        description="Agent name reported by the health endpoint.",
        validation_alias="AGENT_NAME",
    )
    agent_version: str = Field(
        default="0.1.0",
        min_length=1,
        description="Agent version reported by the health endpoint.",
        validation_alias="AGENT_VERSION",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton ``Settings`` instance.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        settings = Settings()
    except ValidationError as exc:
        logger.exception("Invalid application configuration")
        raise RuntimeError(f"Invalid configuration: {exc}") from exc

    logger.info(
        "Settings initialized",
        extra={
            "environment": settings.environment.value,
            "log_level": settings.log_level,
            "agent": f"{settings.agent_name}/{settings.agent_version}",
        },
    )
    return settings
