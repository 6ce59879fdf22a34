"""
Date parsing for query-string parameters, and check-in day/time defaults
"""
from datetime import date, datetime
from typing import Optional, Tuple

from atams.exceptions import BadRequestException


def parse_date(value: Optional[str], field: str = "date") -> Optional[date]:
    """
    Parse a YYYY-MM-DD query value; empty means not given

    Raises:
        BadRequestException: If the value is not a valid date
    """
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise BadRequestException(f"Invalid {field} format. Use YYYY-MM-DD")


def resolve_check_in(
    day: Optional[date],
    at: Optional[datetime],
    now: datetime
) -> Tuple[date, datetime]:
    """
    Attendance day and check-in time from optional request fields

    A day without a time checks in at the current time of day on that day;
    a time without a day uses the time's own day.

    Raises:
        BadRequestException: If the check-in time falls on another day
    """
    if at is not None:
        if day is not None and at.date() != day:
            raise BadRequestException(
                "check_in_time must fall on date",
                details={"date": str(day), "check_in_time": at.isoformat()}
            )
        return at.date(), at

    if day is not None:
        return day, datetime.combine(day, now.time())

    return now.date(), now
