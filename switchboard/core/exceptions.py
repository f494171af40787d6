"""
Exception hierarchy for Switchboard.

Purpose
-------
Define the structured exceptions raised by the lifecycle and dispatch layers.
Two families live here:

- ``UserError``: expected, author-raised failures whose message is shown to
  the invoking user verbatim. They are control flow, not incidents.
- ``SwitchboardError`` subclasses: framework failures (resolution, command
  registration, module initialization, lifecycle misuse, configuration).

Design Notes
------------
- Every framework exception carries ``message``, ``details`` and
  ``error_code`` and can be flattened with ``to_dict()`` for structured logs.
- Wrapping exceptions are raised with ``raise ... from cause`` so the full
  cause chain reaches the logs.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class UserError(Exception):
    """
    Failure meant to be shown to the invoking user.

    Raised by command handlers for invalid input, missing permissions and the
    like. The Reply Policy renders ``message`` as-is and never logs it as an
    error.

    Example:
        >>> raise UserError("You must be in a voice channel to use this.")
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SwitchboardError(Exception):
    """
    Base exception for all framework-level errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error
        error_code: Optional stable code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.error_code: str = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}"
            ")"
        )


class ResolutionError(SwitchboardError):
    """
    Raised when no child of a composite node matches an inbound event.

    Args:
        node_name: Name of the parent command or subcommand group
        operation: ``"execute"`` or ``"autocomplete"``
    """

    def __init__(self, node_name: str, operation: str = "execute") -> None:
        self.node_name = node_name
        self.operation = operation
        super().__init__(
            f"No child of '{node_name}' matched the interaction ({operation})",
            details={"node_name": node_name, "operation": operation},
            error_code="RESOLUTION_FAILED",
        )


class CommandRegistrationError(SwitchboardError):
    """Raised when the remote command-set call fails for a scope."""

    def __init__(self, scope: Optional[int], command_count: int) -> None:
        self.scope = scope
        self.command_count = command_count
        label = "global scope" if scope is None else f"guild {scope}"
        super().__init__(
            f"Failed to register {command_count} commands for {label}",
            details={"scope": scope, "command_count": command_count},
            error_code="COMMAND_REGISTRATION_FAILED",
        )


class ModuleInitializationError(SwitchboardError):
    """Raised when a module's ``initialize`` fails during the ready sequence."""

    def __init__(self, module_name: str) -> None:
        self.module_name = module_name
        super().__init__(
            f'Error while initializing module "{module_name}"',
            details={"module_name": module_name},
            error_code="MODULE_INIT_FAILED",
        )


class LifecycleSignalError(SwitchboardError):
    """Raised when a listener of an awaited lifecycle broadcast fails."""

    def __init__(self, signal_name: str, listener_name: str) -> None:
        self.signal_name = signal_name
        self.listener_name = listener_name
        super().__init__(
            f"Failed to process {signal_name} signal (listener '{listener_name}')",
            details={"signal": signal_name, "listener": listener_name},
            error_code="SIGNAL_FAILED",
        )


class BotStateError(SwitchboardError):
    """Raised when a lifecycle operation is invalid for the bot's current state."""

    def __init__(self, message: str, state: Optional[str] = None) -> None:
        self.state = state
        super().__init__(message, details={"state": state}, error_code="INVALID_BOT_STATE")


class BotNotReadyError(BotStateError):
    """Raised when the bot is accessed before the gateway connection is ready."""

    def __init__(self, accessor: str) -> None:
        self.accessor = accessor
        super().__init__(f"Bot is not ready; cannot access {accessor}")


class ConfigurationError(SwitchboardError):
    """
    Raised when a configuration key is invalid or missing.

    Args:
        config_key: The configuration key that has issues
        message: Description of the configuration problem
    """

    def __init__(self, config_key: str, message: str) -> None:
        self.config_key = config_key
        super().__init__(
            f"Configuration error for {config_key}: {message}",
            details={"config_key": config_key},
            error_code="CONFIG_ERROR",
        )


__all__ = [
    "UserError",
    "SwitchboardError",
    "ResolutionError",
    "CommandRegistrationError",
    "ModuleInitializationError",
    "LifecycleSignalError",
    "BotStateError",
    "BotNotReadyError",
    "ConfigurationError",
]
