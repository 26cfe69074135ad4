"""
app.py - FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires the repositories and the booking manager, registers routers,
and prepares the SQLite database on startup.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from hotel_booking.controllers.booking_controller import router as booking_router
from hotel_booking.repository.data_repository import (
    BookingRepository,
    RoomRepository,
    SqliteDatabase,
)
from hotel_booking.services.booking_service import BookingManager
from hotel_booking.utils.config import Settings, get_settings
from hotel_booking.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Every dependency is created here and exposed through app.state so the
    controllers resolve them per request.
    """
    settings = settings or get_settings()

    database = SqliteDatabase(settings)
    room_repository = RoomRepository(database)
    booking_repository = BookingRepository(database)
    booking_manager = BookingManager(
        booking_repository=booking_repository,
        room_repository=room_repository,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run startup initialization before accepting requests."""
        _startup(app, settings)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.include_router(booking_router)

    app.state.settings = settings
    app.state.database = database
    app.state.room_repository = room_repository
    app.state.booking_repository = booking_repository
    app.state.booking_manager = booking_manager

    return app


def _startup(app: FastAPI, settings: Settings) -> None:
    """
    Idempotent startup sequence. Safe to re-run on server restarts.

    The schema must exist before seeding; seeding is skipped once the room
    catalog has rows.
    """
    database: SqliteDatabase = app.state.database

    logger.info("Startup: initializing database schema")
    database.initialize_database()

    if settings.seed_demo_data:
        logger.info("Startup: seeding demo rooms and bookings")
        database.seed_demo_data()

    logger.info("Startup complete - system ready")


# Module-level app object for uvicorn
app = create_app()
