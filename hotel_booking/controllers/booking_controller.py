"""HTTP controller layer for bookings and the room catalog."""

from __future__ import annotations

from dataclasses import replace
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field, model_validator

from hotel_booking.controllers.dependencies import (
    get_app_settings,
    get_booking_manager,
    get_booking_repository,
    get_room_repository,
)
from hotel_booking.domain.constraints import InvalidBookingPeriodError
from hotel_booking.domain.models import Booking, Room
from hotel_booking.repository.base import EntityInUseError, EntityNotFoundError, Repository
from hotel_booking.services.booking_service import BookingManager
from hotel_booking.utils.config import Settings
from hotel_booking.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter()


class RoomCreateRequest(BaseModel):
    description: str = Field(min_length=1)


class RoomResponse(BaseModel):
    id: int
    description: str


class BookingCreateRequest(BaseModel):
    """Input DTO; the allocator assigns the room and activates the booking."""

    start_date: date
    end_date: date
    customer_id: int = Field(gt=0)


class BookingUpdateRequest(BaseModel):
    start_date: date
    end_date: date
    customer_id: int = Field(gt=0)
    is_active: bool

    @model_validator(mode="after")
    def validate_period(self) -> "BookingUpdateRequest":
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be later than end_date")
        return self


class BookingResponse(BaseModel):
    id: int
    start_date: date
    end_date: date
    customer_id: int
    room_id: int
    is_active: bool


class AvailableRoomResponse(BaseModel):
    room_id: int | None


class FullyOccupiedDatesResponse(BaseModel):
    dates: list[date]


def _to_room_response(room: Room) -> RoomResponse:
    return RoomResponse(id=room.id, description=room.description)


def _to_booking_response(booking: Booking) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        start_date=booking.start_date,
        end_date=booking.end_date,
        customer_id=booking.customer_id,
        room_id=booking.room_id,
        is_active=booking.is_active,
    )


@router.get("/rooms", response_model=list[RoomResponse], tags=["rooms"])
async def list_rooms(
    repository: Repository[Room] = Depends(get_room_repository),
) -> list[RoomResponse]:
    return [_to_room_response(room) for room in repository.get_all()]


@router.get("/rooms/available", response_model=AvailableRoomResponse, tags=["rooms"])
async def find_available_room(
    start_date: date,
    end_date: date,
    manager: BookingManager = Depends(get_booking_manager),
) -> AvailableRoomResponse:
    """Preview which room a booking for the period would get."""
    try:
        room_id = manager.find_available_room_id(start_date, end_date)
    except InvalidBookingPeriodError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return AvailableRoomResponse(room_id=room_id)


@router.get("/rooms/{room_id}", response_model=RoomResponse, tags=["rooms"])
async def get_room(
    room_id: int,
    repository: Repository[Room] = Depends(get_room_repository),
) -> RoomResponse:
    room = repository.get(room_id)
    if room is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Room {room_id} not found",
        )
    return _to_room_response(room)


@router.post(
    "/rooms",
    response_model=RoomResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["rooms"],
)
async def create_room(
    payload: RoomCreateRequest,
    repository: Repository[Room] = Depends(get_room_repository),
) -> RoomResponse:
    room = repository.add(Room(id=None, description=payload.description))
    logger.info("Added room %s (%s)", room.id, room.description)
    return _to_room_response(room)


@router.delete("/rooms/{room_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["rooms"])
async def delete_room(
    room_id: int,
    repository: Repository[Room] = Depends(get_room_repository),
) -> Response:
    try:
        repository.remove(room_id)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except EntityInUseError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/bookings", response_model=list[BookingResponse], tags=["bookings"])
async def list_bookings(
    repository: Repository[Booking] = Depends(get_booking_repository),
) -> list[BookingResponse]:
    return [_to_booking_response(booking) for booking in repository.get_all()]


@router.get(
    "/bookings/fully_occupied_dates",
    response_model=FullyOccupiedDatesResponse,
    tags=["bookings"],
)
def get_fully_occupied_dates(
    start_date: date,
    end_date: date,
    manager: BookingManager = Depends(get_booking_manager),
    settings: Settings = Depends(get_app_settings),
) -> FullyOccupiedDatesResponse:
    """Runs in the threadpool; the day scan is linear in the range length."""
    if (end_date - start_date).days >= settings.occupancy_query_max_days:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Date range must span fewer than {settings.occupancy_query_max_days} days",
        )
    try:
        dates = manager.get_fully_occupied_dates(start_date, end_date)
    except InvalidBookingPeriodError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return FullyOccupiedDatesResponse(dates=dates)


@router.get("/bookings/{booking_id}", response_model=BookingResponse, tags=["bookings"])
async def get_booking(
    booking_id: int,
    repository: Repository[Booking] = Depends(get_booking_repository),
) -> BookingResponse:
    booking = repository.get(booking_id)
    if booking is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Booking {booking_id} not found",
        )
    return _to_booking_response(booking)


@router.post(
    "/bookings",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["bookings"],
)
async def create_booking(
    payload: BookingCreateRequest,
    manager: BookingManager = Depends(get_booking_manager),
) -> BookingResponse:
    booking = Booking(
        start_date=payload.start_date,
        end_date=payload.end_date,
        customer_id=payload.customer_id,
    )
    try:
        created = manager.create_booking(booking)
    except InvalidBookingPeriodError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected booking failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create booking",
        ) from exc
    if not created:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=(
                "The booking could not be created. All rooms are occupied. "
                "Please try another period."
            ),
        )
    return _to_booking_response(booking)


@router.put(
    "/bookings/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["bookings"],
)
async def update_booking(
    booking_id: int,
    payload: BookingUpdateRequest,
    repository: Repository[Booking] = Depends(get_booking_repository),
    manager: BookingManager = Depends(get_booking_manager),
) -> Response:
    """Edit dates, customer or active flag; the room assignment is kept."""
    existing = repository.get(booking_id)
    if existing is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Booking {booking_id} not found",
        )
    edited = replace(
        existing,
        start_date=payload.start_date,
        end_date=payload.end_date,
        customer_id=payload.customer_id,
        is_active=payload.is_active,
    )
    try:
        updated = manager.edit_booking(edited)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Room {existing.room_id} is already booked in that period",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/bookings/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["bookings"],
)
async def delete_booking(
    booking_id: int,
    repository: Repository[Booking] = Depends(get_booking_repository),
) -> Response:
    try:
        repository.remove(booking_id)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
