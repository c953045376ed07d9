"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        BarcodeBattlerError: Base exception for all application errors.
        GameEngineError: Base for battle engine contract violations.
        ConfigurationError: Configuration-related errors.
        ValidationError: Data validation errors.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from barcode_battler.core.config import (
    GameSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from barcode_battler.core.exceptions import (
    BarcodeBattlerError,
    BattleError,
    ConfigurationError,
    GameEngineError,
    InvalidBattleStateError,
    InvalidCreatureError,
    TurnOrderError,
    ValidationError,
)
from barcode_battler.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "BarcodeBattlerError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidBattleStateError",
    "TurnOrderError",
    "BattleError",
    "InvalidCreatureError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "GameSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
