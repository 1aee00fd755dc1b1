"""
Error handling tests for the fasting tracker.

Tests cover the error hierarchy and how each error class degrades.
"""

from fasting_app.errors import (
    GracefulDegradationError,
    InvalidTimestamp,
    NotificationDenied,
    NotificationError,
    NotificationUnsupported,
    PersistenceError,
    PersistenceReadError,
    PersistenceWriteError,
    SessionAlreadyActive,
    TrackerInputError,
)


class TestErrorClassification:
    """Test error classification system."""

    def test_input_error_hierarchy(self):
        base_error = TrackerInputError("base error")
        assert base_error.recoverable is True
        assert base_error.context == {}

        invalid = InvalidTimestamp("Could not parse date/time.", raw_value="soon",
                                   context={"error": "Unknown string format"})
        assert isinstance(invalid, TrackerInputError)
        assert invalid.raw_value == "soon"
        assert invalid.context["error"] == "Unknown string format"

        active = SessionAlreadyActive("A fast is already running.", start_time=5)
        assert isinstance(active, TrackerInputError)
        assert active.start_time == 5

    def test_persistence_errors_degrade(self):
        read_error = PersistenceReadError("bad record", target="key")
        write_error = PersistenceWriteError("disk full", target="db")

        for error in (read_error, write_error):
            assert isinstance(error, PersistenceError)
            assert isinstance(error, GracefulDegradationError)
            assert error.allows_degradation is True
            assert error.degraded_functionality == "persistence"
            assert error.recoverable is True

        assert read_error.operation == "read"
        assert read_error.fallback_strategy == "defaults"
        assert write_error.operation == "write"
        assert write_error.fallback_strategy == "skip_write"

    def test_notification_errors_disable_preference(self):
        unsupported = NotificationUnsupported("no capability", notifier="null")
        denied = NotificationDenied("Notifications denied.", notifier="command", permission="denied")

        for error in (unsupported, denied):
            assert isinstance(error, NotificationError)
            assert error.fallback_strategy == "disable_preference"
            assert error.degraded_functionality == "platform_notifications"

        assert unsupported.notifier == "null"
        assert denied.permission == "denied"
        assert str(denied) == "Notifications denied."
