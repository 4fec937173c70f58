# Area: Shared Tests
"""Tests for the exception hierarchy."""

import pytest

from ulti_stats.errors import (
    GameNotFoundError,
    GameStateError,
    InvalidSelectionError,
    InvalidTransitionError,
    NotFoundError,
    ScorekeeperError,
    ScoringBusyError,
    StorageUnavailableError,
)


class TestHierarchy:
    """Tests for exception inheritance."""

    @pytest.mark.parametrize("cls", [
        InvalidSelectionError,
        InvalidTransitionError,
        StorageUnavailableError,
        NotFoundError,
        GameNotFoundError,
        GameStateError,
        ScoringBusyError,
    ])
    def test_all_are_scorekeeper_errors(self, cls):
        """Test every error can be caught as ScorekeeperError."""
        assert issubclass(cls, ScorekeeperError)

    def test_game_not_found_is_not_found(self):
        """Test GameNotFoundError carries entity and id."""
        error = GameNotFoundError("G1")
        assert isinstance(error, NotFoundError)
        assert error.entity == "Game"
        assert error.entity_id == "G1"
        assert "G1" in str(error)


class TestStorageUnavailableError:
    """Tests for StorageUnavailableError."""

    def test_message_includes_operation_and_cause(self):
        """Test the message names the failed operation and its cause."""
        error = StorageUnavailableError("append_event", ConnectionError("offline"))
        assert "append_event" in str(error)
        assert "offline" in str(error)
        assert isinstance(error.cause, ConnectionError)

    def test_format_error_log(self):
        """Test the structured block includes operation, cause and context."""
        error = StorageUnavailableError(
            "update_game", TimeoutError("slow"), context={"game_id": "G1"}
        )
        block = error.format_error_log()
        assert "STORAGE_UNAVAILABLE" in block
        assert "update_game" in block
        assert "TimeoutError: slow" in block
        assert '"game_id": "G1"' in block

    def test_format_error_log_without_context(self):
        """Test the block omits the context section when empty."""
        block = StorageUnavailableError("list_events").format_error_log()
        assert "CONTEXT" not in block
        assert "Cause:" not in block


class TestSelectionErrors:
    """Tests for selection and transition errors."""

    def test_transition_error_fields(self):
        """Test InvalidTransitionError records action and step."""
        error = InvalidTransitionError("SELECT_SCORER", "AWAITING_TEAM")
        assert error.action == "SELECT_SCORER"
        assert error.step == "AWAITING_TEAM"
        assert "SELECT_SCORER" in str(error)

    def test_busy_error_game_id(self):
        """Test ScoringBusyError keeps the game id."""
        assert ScoringBusyError("G1").game_id == "G1"
