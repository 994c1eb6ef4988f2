from datetime import datetime, timedelta
import tzlocal


def current_datetime_local_timezone() -> datetime:
    """
    Returns the current date and time in the local timezone.

    Returns:
        A datetime object representing the current date and time.
    """
    return datetime.now(tzlocal.get_localzone())


def convert_datetime_to_iso(date_time: datetime) -> str:
    """
    Converts a given datetime object to a string in ISO format, adjusted
    to the local timezone.

    Args:
        date_time: The datetime object to be converted.

    Returns:
        The ISO formatted string of the datetime in the local timezone.
    """
    return date_time.astimezone(tzlocal.get_localzone()).isoformat()


def time_window_from_now(window: timedelta) -> tuple[datetime, datetime]:
    """
    Returns the half-open interval [now, now + window) in the local timezone.

    Args:
        window: Length of the interval.

    Returns:
        A (start, end) tuple of timezone-aware datetimes.
    """
    start = current_datetime_local_timezone()
    return start, start + window
