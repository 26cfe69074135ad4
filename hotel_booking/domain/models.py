"""Domain models for the room catalog and bookings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from hotel_booking.domain.constraints import to_day


@dataclass(frozen=True)
class Room:
    id: Optional[int]
    description: str


@dataclass
class Booking:
    """A stay request, committed once the allocator assigns a room.

    Dates are inclusive and held at day granularity.
    """

    start_date: date
    end_date: date
    customer_id: int
    id: Optional[int] = None
    room_id: Optional[int] = None
    is_active: bool = False

    def __post_init__(self) -> None:
        self.start_date = to_day(self.start_date)
        self.end_date = to_day(self.end_date)

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def overlaps(self, start_date: date, end_date: date) -> bool:
        return self.start_date <= end_date and self.end_date >= start_date
