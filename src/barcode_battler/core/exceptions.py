"""Custom exception hierarchy for the Barcode Battler core.

This module defines the exception hierarchy used across the creature
generation and battle engine. All exceptions inherit from
BarcodeBattlerError, enabling unified error handling at the embedding
application's boundary while preserving domain-specific context.

Only broken caller contracts are raised as exceptions (acting out of turn,
acting on a finished battle, starting a battle with malformed creatures).
Bad user input such as an invalid barcode is reported through explicit
result objects instead.

Example:
    >>> from barcode_battler.core.exceptions import TurnOrderError
    >>> raise TurnOrderError("Not player turn", current_turn="opponent")
"""

from __future__ import annotations

from typing import Any


class BarcodeBattlerError(Exception):
    """Base exception for all Barcode Battler errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception.

        Returns:
            String representation suitable for debugging.
        """
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(BarcodeBattlerError):
    """Base exception for all game engine errors.

    Raised when the embedding application drives the battle engine in a
    way that violates its contract.
    """


class InvalidBattleStateError(GameEngineError):
    """Raised when an operation is attempted in the wrong battle state.

    This typically occurs when an action is executed with no battle in
    progress or after the battle has already been won or lost.
    """

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid battle state error with state context.

        Args:
            message: Human-readable error description.
            current_state: The current battle status, if any.
            expected_states: List of states the operation requires.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if current_state:
            combined_details["current_state"] = current_state
        if expected_states:
            combined_details["expected_states"] = expected_states
        super().__init__(message, details=combined_details)


class TurnOrderError(GameEngineError):
    """Raised when a side tries to act while it is not its turn."""

    def __init__(
        self,
        message: str,
        *,
        current_turn: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize turn order error with turn context.

        Args:
            message: Human-readable error description.
            current_turn: The side whose turn it actually is.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if current_turn:
            combined_details["current_turn"] = current_turn
        super().__init__(message, details=combined_details)


class BattleError(GameEngineError):
    """Raised when action resolution encounters an error.

    This includes unknown action types and other failures while resolving
    a single attack, special or defend.
    """

    def __init__(
        self,
        message: str,
        *,
        actor: str | None = None,
        turn_count: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize battle error with combat context.

        Args:
            message: Human-readable error description.
            actor: The side that was acting ('player' or 'opponent').
            turn_count: Battle turn counter when the error occurred.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if actor:
            combined_details["actor"] = actor
        if turn_count is not None:
            combined_details["turn_count"] = turn_count
        super().__init__(message, details=combined_details)


class InvalidCreatureError(GameEngineError):
    """Raised when a battle is initiated with a structurally invalid creature."""

    def __init__(
        self,
        message: str,
        *,
        side: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid creature error.

        Args:
            message: Human-readable error description.
            side: Which side of the battle supplied the creature.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if side:
            combined_details["side"] = side
        super().__init__(message, details=combined_details)


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(BarcodeBattlerError):
    """Raised when application configuration is invalid.

    This includes invalid values or incompatible configuration combinations.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(BarcodeBattlerError):
    """Raised when data validation fails.

    Most validation failures in the core surface as failure results; this
    exception is used where a collaborator hands over data that cannot be
    interpreted at all, such as an unknown difficulty identifier passed to
    the battle engine.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


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
]
