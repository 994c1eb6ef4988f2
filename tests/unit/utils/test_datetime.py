import pytest
from datetime import datetime, timedelta, timezone
import tzlocal
from availability_responder.utils.datetime import (
    current_datetime_local_timezone,
    convert_datetime_to_iso,
    time_window_from_now
)


@pytest.mark.unit
class TestDatetimeUtil:
    """Test cases for datetime utility functions."""

    def test_current_datetime_local_timezone(self):
        """Test current_datetime_local_timezone returns timezone-aware datetime."""
        result = current_datetime_local_timezone()

        assert isinstance(result, datetime)
        assert result.tzinfo is not None
        assert result.tzinfo == tzlocal.get_localzone()

    def test_convert_datetime_to_iso(self):
        """Test convert_datetime_to_iso keeps the instant and carries an offset."""
        dt = datetime(2025, 1, 15, 14, 30, 0, tzinfo=timezone.utc)

        result = convert_datetime_to_iso(dt)

        parsed = datetime.fromisoformat(result)
        assert parsed.utcoffset() is not None
        assert parsed == dt

    def test_time_window_from_now(self):
        """Test the window starts now and has the requested length."""
        before = current_datetime_local_timezone()
        start, end = time_window_from_now(timedelta(seconds=60))
        after = current_datetime_local_timezone()

        assert before <= start <= after
        assert end - start == timedelta(seconds=60)
        assert start.tzinfo == tzlocal.get_localzone()
