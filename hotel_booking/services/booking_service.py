"""Room allocation over the room catalog and booking store."""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional

from hotel_booking.domain.constraints import (
    iter_days,
    to_day,
    validate_booking_period,
    validate_date_range,
)
from hotel_booking.domain.models import Booking, Room
from hotel_booking.repository.base import Repository
from hotel_booking.utils.logger import get_logger


logger = get_logger(__name__)

NO_ROOM_AVAILABLE = -1


class BookingManager:
    """Finds free rooms, commits bookings and reports fully occupied days.

    Every call reads rooms and bookings once and writes at most one booking
    after the decision is made. Calls are not serialized: two concurrent
    create_booking calls may both claim the last free room.
    """

    def __init__(
        self,
        booking_repository: Repository[Booking],
        room_repository: Repository[Room],
        today: Callable[[], date] = date.today,
    ) -> None:
        self._booking_repository = booking_repository
        self._room_repository = room_repository
        self._today = today

    def find_available_room(
        self,
        start_date: date | datetime,
        end_date: date | datetime,
    ) -> int:
        """Return the first room in catalog order free for the whole stay.

        Returns NO_ROOM_AVAILABLE when every room has an overlapping active
        booking. Raises InvalidBookingPeriodError unless start_date is after
        today and not after end_date.
        """
        start_day, end_day = to_day(start_date), to_day(end_date)
        validate_booking_period(start_day, end_day, to_day(self._today()))

        active_bookings = [
            booking for booking in self._booking_repository.get_all() if booking.is_active
        ]
        for room in self._room_repository.get_all():
            if not any(
                booking.room_id == room.id and booking.overlaps(start_day, end_day)
                for booking in active_bookings
            ):
                return room.id
        return NO_ROOM_AVAILABLE

    def find_available_room_id(
        self,
        start_date: date | datetime,
        end_date: date | datetime,
    ) -> Optional[int]:
        """Same search as find_available_room, with None for no free room."""
        room_id = self.find_available_room(start_date, end_date)
        if room_id == NO_ROOM_AVAILABLE:
            return None
        return room_id

    def create_booking(self, booking: Booking) -> bool:
        """Assign a free room to `booking` and persist it.

        The booking is left untouched and nothing is written when no room is
        free for the requested period.
        """
        room_id = self.find_available_room(booking.start_date, booking.end_date)
        if room_id == NO_ROOM_AVAILABLE:
            logger.info(
                "No room available from %s to %s for customer %s",
                booking.start_date,
                booking.end_date,
                booking.customer_id,
            )
            return False

        booking.room_id = room_id
        booking.is_active = True
        self._booking_repository.add(booking)
        logger.info(
            "Booked room %s from %s to %s for customer %s",
            room_id,
            booking.start_date,
            booking.end_date,
            booking.customer_id,
        )
        return True

    def edit_booking(self, booking: Booking) -> bool:
        """Persist changes to a committed booking unless they double-book its room.

        Returns False without writing when the booking is active and another
        active booking of the same room overlaps its period.
        """
        start_day, end_day = to_day(booking.start_date), to_day(booking.end_date)
        validate_date_range(start_day, end_day)

        if booking.is_active and any(
            other.is_active
            and other.id != booking.id
            and other.room_id == booking.room_id
            and other.overlaps(start_day, end_day)
            for other in self._booking_repository.get_all()
        ):
            logger.info(
                "Rejected edit of booking %s: room %s is taken from %s to %s",
                booking.id,
                booking.room_id,
                start_day,
                end_day,
            )
            return False

        self._booking_repository.edit(booking)
        return True

    def get_fully_occupied_dates(
        self,
        start_date: date | datetime,
        end_date: date | datetime,
    ) -> list[date]:
        """Return the days in [start_date, end_date] on which every room is booked."""
        start_day, end_day = to_day(start_date), to_day(end_date)
        validate_date_range(start_day, end_day)

        room_ids = {room.id for room in self._room_repository.get_all()}
        active_bookings = [
            booking for booking in self._booking_repository.get_all() if booking.is_active
        ]
        if not room_ids or not active_bookings:
            return []

        fully_occupied: list[date] = []
        for day in iter_days(start_day, end_day):
            occupied_rooms = {
                booking.room_id for booking in active_bookings if booking.covers(day)
            }
            if occupied_rooms >= room_ids:
                fully_occupied.append(day)
        return fully_occupied
