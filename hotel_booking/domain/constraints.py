"""Date-range validation rules for booking queries."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator


class InvalidBookingPeriodError(ValueError):
    """Raised when a requested date range violates booking preconditions."""


def to_day(value: date | datetime) -> date:
    """Strip any time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"expected date or datetime, got {type(value).__name__}")


def validate_booking_period(start_date: date, end_date: date, today: date) -> None:
    if start_date <= today:
        raise InvalidBookingPeriodError(
            "The start date cannot be in the past or today"
        )
    if end_date < start_date:
        raise InvalidBookingPeriodError(
            "The start date cannot be later than the end date"
        )


def validate_date_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise InvalidBookingPeriodError(
            "The start date cannot be later than the end date"
        )


def iter_days(start_date: date, end_date: date) -> Iterator[date]:
    for offset in range((end_date - start_date).days + 1):
        yield start_date + timedelta(days=offset)
