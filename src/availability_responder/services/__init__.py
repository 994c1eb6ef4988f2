"""Provider-facing services."""

from . import calendar

__all__ = [
    "calendar",
]
