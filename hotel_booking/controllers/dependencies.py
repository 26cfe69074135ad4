"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request, status

from hotel_booking.domain.models import Booking, Room
from hotel_booking.repository.base import Repository
from hotel_booking.services.booking_service import BookingManager
from hotel_booking.utils.config import Settings, get_settings


def _require_state(request: Request, attribute: str, label: str) -> Any:
    value = getattr(request.app.state, attribute, None)
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{label} is not initialized",
        )
    return value


def get_room_repository(request: Request) -> Repository[Room]:
    return _require_state(request, "room_repository", "Room repository")


def get_booking_repository(request: Request) -> Repository[Booking]:
    return _require_state(request, "booking_repository", "Booking repository")


def get_booking_manager(request: Request) -> BookingManager:
    manager = getattr(request.app.state, "booking_manager", None)
    if manager is None:
        manager = BookingManager(
            booking_repository=get_booking_repository(request),
            room_repository=get_room_repository(request),
        )
        request.app.state.booking_manager = manager
    return manager


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()
