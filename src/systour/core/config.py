"""
systour Centralized Configuration

Provides validated, type-safe access to all environment variables using Pydantic Settings.
All environment variables are validated at first access with helpful error messages.

Usage:
    from systour.core.config import get_settings

    settings = get_settings()
    if settings.closed_tour:
        ...

Environment Variables:
    SYSTOUR_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    SYSTOUR_DEBUG: Legacy debug flag (enables DEBUG level if set)
    SYSTOUR_LOG_JSON: Output logs as JSON
    SYSTOUR_DEBUG_TIMING: Enable timing debug logs
    SYSTOUR_MAX_SYSTEMS: Exact-search feasibility threshold (default 20)
    SYSTOUR_CLOSED_TOUR: Require the route to return to its start system
    SYSTOUR_DIRECTED: Treat map connections as one-way
    SYSTOUR_DUPLICATE_POLICY: "min" or "error" for conflicting duplicate connections
    SYSTOUR_ALGORITHM: "held_karp" or "branch_and_bound"
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Algorithm = Literal["held_karp", "branch_and_bound"]
DuplicatePolicy = Literal["min", "error"]


def _find_project_env_file() -> Path | None:
    """
    Find .env file by searching for project root markers.

    Searches upward from this file's location for pyproject.toml,
    then checks for .env in that directory.

    Returns:
        Path to .env if found, None otherwise
    """
    current = Path(__file__).resolve().parent

    for _ in range(10):  # Limit search depth
        if (current / "pyproject.toml").exists():
            env_file = current / ".env"
            if env_file.exists():
                return env_file
            return None  # Project root found but no .env
        parent = current.parent
        if parent == current:
            break  # Reached filesystem root
        current = parent

    return None


_ENV_FILE = _find_project_env_file()


class SystourSettings(BaseSettings):
    """
    systour configuration settings with validation.

    Environment variables are automatically loaded with the SYSTOUR_ prefix.
    All settings have sensible defaults and validation.
    """

    model_config = SettingsConfigDict(
        env_prefix="SYSTOUR_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # =========================================================================
    # Logging Configuration
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level for systour components",
    )

    debug: bool = Field(
        default=False,
        description="Legacy debug flag (enables DEBUG level if set)",
    )

    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format for machine parsing",
    )

    debug_timing: bool = Field(
        default=False,
        description="Enable timing debug logs for performance analysis",
    )

    # =========================================================================
    # Solver Configuration
    # =========================================================================

    max_systems: int = Field(
        default=20,
        ge=1,
        description="Largest system count accepted by the exact search",
    )

    closed_tour: bool = Field(
        default=False,
        description="Add the return leg to the start system to the route cost",
    )

    algorithm: Algorithm = Field(
        default="held_karp",
        description="Exact search engine used to order the systems",
    )

    # =========================================================================
    # Graph Model Configuration
    # =========================================================================

    directed: bool = Field(
        default=False,
        description="Treat connections as one-way jumps",
    )

    duplicate_policy: DuplicatePolicy = Field(
        default="min",
        description="Conflicting duplicate connections: keep the minimum or fail",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("algorithm", "duplicate_policy", mode="before")
    @classmethod
    def lowercase_choice(cls, v: str) -> str:
        if isinstance(v, str):
            return v.lower()
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def effective_log_level(self) -> str:
        """
        Get effective log level, respecting legacy SYSTOUR_DEBUG.

        Priority:
        1. Explicit SYSTOUR_LOG_LEVEL
        2. SYSTOUR_DEBUG=1 -> DEBUG
        3. Default: WARNING
        """
        if self.debug and self.log_level == "WARNING":
            return "DEBUG"
        return self.log_level

    @property
    def log_level_int(self) -> int:
        """Get effective log level as logging constant."""
        return getattr(logging, self.effective_log_level)


# =============================================================================
# Singleton Accessor
# =============================================================================


@lru_cache(maxsize=1)
def get_settings() -> SystourSettings:
    """
    Get the singleton settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    The settings are validated at first access.

    Returns:
        SystourSettings instance with validated configuration
    """
    return SystourSettings()


def reset_settings() -> None:
    """
    Reset the settings cache (for testing).

    After calling this, the next get_settings() call will
    reload settings from environment variables.
    """
    get_settings.cache_clear()


# =============================================================================
# Convenience Functions
# =============================================================================


def is_json_logging() -> bool:
    """Check if JSON logging is enabled."""
    return get_settings().log_json


def is_timing_enabled() -> bool:
    """Check if solve timing logs are enabled."""
    return get_settings().debug_timing
