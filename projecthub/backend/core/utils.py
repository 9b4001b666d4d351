"""
Core Utilities.

Clock helpers shared by models, repositories, schemas and the export
pipeline. Stored datetimes are timezone-naive and always UTC.
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Return current UTC time with tzinfo stripped."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_today() -> date:
    """
    Return the current UTC calendar date.

    Due dates are compared against this, so "today" follows UTC rather
    than the host's local zone.
    """
    return utc_now().date()
