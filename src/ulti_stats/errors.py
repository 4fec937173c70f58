"""
ulti_stats.errors — Custom exception classes
============================================

Defines the exception hierarchy for the scoring core.
Storage errors keep the failing operation and its cause for
structured logging.
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import json


class ScorekeeperError(Exception):
    """Base exception for all ulti_stats errors."""
    pass


class InvalidSelectionError(ScorekeeperError):
    """Raised when a team or player id is outside the valid set."""

    def __init__(self, message: str, selection: Optional[str] = None):
        self.selection = selection
        super().__init__(message)


class InvalidTransitionError(InvalidSelectionError):
    """Raised when an interaction action is not valid in the current step."""

    def __init__(self, action: str, step: str):
        self.action = action
        self.step = step
        super().__init__(f"Invalid action '{action}' in step {step}")


class StorageUnavailableError(ScorekeeperError):
    """Raised when a persistence call fails."""

    def __init__(
        self,
        operation: str,
        cause: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.operation = operation
        self.cause = cause
        self.context = context or {}
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Storage operation '{operation}' failed{detail}")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="STORAGE_UNAVAILABLE",
            operation=self.operation,
            cause=self.cause,
            context=self.context,
        )


class NotFoundError(ScorekeeperError):
    """Raised when a record does not exist (or the log is empty)."""

    def __init__(self, entity: str, entity_id: Optional[str] = None):
        self.entity = entity
        self.entity_id = entity_id
        if entity_id:
            super().__init__(f"{entity} '{entity_id}' not found")
        else:
            super().__init__(f"{entity} not found")


class GameNotFoundError(NotFoundError):
    """Raised when a game id no longer exists."""

    def __init__(self, game_id: str):
        super().__init__("Game", game_id)


class GameStateError(ScorekeeperError):
    """Raised when an operation is not allowed in the game's current status."""
    pass


class ScoringBusyError(ScorekeeperError):
    """Raised when a scoring action arrives while a write is still in flight."""

    def __init__(self, game_id: Optional[str] = None):
        self.game_id = game_id
        super().__init__("A scoring write is already in progress")


def _format_error_block(
    error_type: str,
    operation: str,
    cause: Optional[BaseException],
    context: Dict[str, Any],
) -> str:
    """Format a structured error block for terminal output."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " STORAGE ERROR: OPERATION FAILED, STATE UNCHANGED",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Operation:    {operation}",
    ]

    if cause is not None:
        lines.append(f" Cause:        {cause.__class__.__name__}: {cause}")

    if context:
        lines.append("")
        lines.append(" ── CONTEXT " + "─" * 52)
        lines.append(_indent_json(context))

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
