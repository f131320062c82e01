# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Configuration for the capability router.

Loads from environment variables with the CAPABILITY_ROUTER_ prefix, or
from a ``.env`` file in the working directory.

Example:
    CAPABILITY_ROUTER_HISTORY_CAPACITY=250
    CAPABILITY_ROUTER_FALLBACK_HANDLER_ID=frontend
    CAPABILITY_ROUTER_REGISTRY_PATH=/etc/router/handlers.yaml
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigCapabilityRouter(BaseSettings):
    """Runtime configuration for routing, dispatch and history."""

    model_config = SettingsConfigDict(
        env_prefix="CAPABILITY_ROUTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    history_capacity: int = Field(
        default=100,
        ge=1,
        le=100000,
        description="Maximum number of routing records kept in memory (FIFO eviction)",
    )
    fallback_handler_id: str | None = Field(
        default=None,
        description=(
            "Registered handler invoked once when the selected handler fails. "
            "When unset, a primary failure is a complete routing failure."
        ),
    )
    min_confidence: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description=(
            "Confidence below which a decision is flagged as not meeting the "
            "threshold. Flagged decisions are still dispatched."
        ),
    )
    max_alternatives: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Number of runner-up handlers reported with each decision",
    )
    registry_path: Path | None = Field(
        default=None,
        description="Optional YAML handler catalogue loaded at router construction",
    )


@lru_cache(maxsize=1)
def get_config() -> ConfigCapabilityRouter:
    """Return the process-wide router configuration."""
    return ConfigCapabilityRouter()


def clear_config_cache() -> None:
    """Drop the cached configuration so the next call re-reads the environment."""
    get_config.cache_clear()


__all__ = [
    "ConfigCapabilityRouter",
    "clear_config_cache",
    "get_config",
]
