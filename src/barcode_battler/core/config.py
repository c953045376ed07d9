"""Configuration management for the Barcode Battler core.

This module provides centralized configuration management using
pydantic-settings, supporting environment variables, .env files, and
runtime configuration overrides.

Only operational knobs live here. The generation and combat formula
constants are in :mod:`barcode_battler.core.constants` and are not
configurable, because identical barcodes must produce identical creatures
in every deployment.

Example:
    >>> from barcode_battler.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.game.special_attack_cap)
    3

Environment Variables:
    BARCODE_BATTLER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    BARCODE_BATTLER_JSON_LOGS: Emit JSON log lines instead of console output
    BARCODE_BATTLER_GAME_DEFAULT_DIFFICULTY: Tier used when none is given
    BARCODE_BATTLER_GAME_SPECIAL_ATTACK_CAP: Special attacks allowed per side
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from barcode_battler.core.exceptions import ConfigurationError


class GameSettings(BaseSettings):
    """Configuration for battle engine and progression behavior.

    Attributes:
        default_difficulty: Difficulty used when a battle is started without one.
        special_attack_cap: Maximum special attacks per side per battle.
        max_level_ups_per_award: Safety cap on level-ups from one experience grant.
        battle_history_limit: Completed battles kept in the engine's history.
    """

    model_config = SettingsConfigDict(
        env_prefix="BARCODE_BATTLER_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_difficulty: Literal["easy", "medium", "hard"] = Field(
        default="medium",
        description="Difficulty used when none is specified",
    )
    special_attack_cap: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Special attacks allowed per side per battle",
    )
    max_level_ups_per_award: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Level-ups allowed from a single experience award",
    )
    battle_history_limit: int = Field(
        default=100,
        ge=1,
        description="Completed battles retained in memory",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Render log lines as JSON.
        log_file: Optional file that receives a copy of the logs.
        game: Battle engine and progression settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="BARCODE_BATTLER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Barcode Battler",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path",
    )

    game: GameSettings = Field(default_factory=GameSettings)

    @model_validator(mode="after")
    def validate_debug_log_level(self) -> "Settings":
        """Ensure debug mode is not combined with a quiet log level.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If debug is enabled with ERROR or CRITICAL logging.
        """
        if self.debug and self.log_level in ("ERROR", "CRITICAL"):
            raise ConfigurationError(
                f"debug mode requires a log level of WARNING or lower, got {self.log_level}",
                config_key="log_level",
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is invalid.

    Example:
        >>> settings = get_settings()
        >>> print(settings.app_name)
        'Barcode Battler'
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    This is primarily useful for testing or when environment variables
    have changed at runtime.
    """
    get_settings.cache_clear()


__all__ = [
    "GameSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
