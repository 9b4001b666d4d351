"""
Date Formatting and Due-Date Buckets.

Human-readable date rendering shared by response schemas and exports.
Formats are fixed (en-US style) and do not depend on the process locale.
"""

from datetime import date, datetime
from enum import Enum

from projecthub.backend.core.utils import utc_today

SOON_WINDOW_DAYS = 7

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


class DueStatus(str, Enum):
    """Due-date bucket relative to today."""

    OVERDUE = "overdue"
    TODAY = "today"
    SOON = "soon"
    NORMAL = "normal"


def days_until(due: date, today: date | None = None) -> int:
    """Whole days from today until the due date (negative when past)."""
    return (due - (today or utc_today())).days


def classify_due_date(due: date | None, today: date | None = None) -> DueStatus | None:
    """
    Bucket a due date.

    Returns:
        OVERDUE before today, TODAY on the day, SOON within the next
        seven days, NORMAL beyond that, None when there is no due date.
    """
    if due is None:
        return None
    diff = days_until(due, today)
    if diff < 0:
        return DueStatus.OVERDUE
    if diff == 0:
        return DueStatus.TODAY
    if diff <= SOON_WINDOW_DAYS:
        return DueStatus.SOON
    return DueStatus.NORMAL


def due_date_label(due: date | None, today: date | None = None) -> str | None:
    """Short label for a due date, e.g. 'Due in 3 days' or '2 days overdue'."""
    status = classify_due_date(due, today)
    if status is None:
        return None
    diff = days_until(due, today)
    if status is DueStatus.OVERDUE:
        return f"{abs(diff)} days overdue"
    if status is DueStatus.TODAY:
        return "Due today"
    if status is DueStatus.SOON:
        return f"Due in {diff} days"
    return f"Due {_MONTHS[due.month - 1][:3]} {due.day}, {due.year}"


def format_date(value: date) -> str:
    """Long date, e.g. 'March 5, 2024'."""
    return f"{_MONTHS[value.month - 1]} {value.day}, {value.year}"


def format_timestamp(value: datetime) -> str:
    """Short timestamp, e.g. 'Mar 5, 2024, 02:30 PM'."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return (
        f"{_MONTHS[value.month - 1][:3]} {value.day}, {value.year}, "
        f"{hour:02d}:{value.minute:02d} {meridiem}"
    )
