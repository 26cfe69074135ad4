#!/usr/bin/env python3
"""Validate local environment readiness for the booking API."""

from __future__ import annotations

import importlib
import shutil
import sys
import tempfile
from dataclasses import replace
from datetime import date, timedelta
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hotel_booking.domain.models import Booking
from hotel_booking.repository.data_repository import (
    BookingRepository,
    RoomRepository,
    SqliteDatabase,
)
from hotel_booking.services.booking_service import NO_ROOM_AVAILABLE, BookingManager
from hotel_booking.utils.config import get_settings

SEPARATOR_LINE = "=" * 44

REQUIRED_PACKAGES = [
    ("fastapi", "fastapi"),
    ("uvicorn", "uvicorn"),
    ("pydantic", "pydantic"),
    ("httpx", "httpx"),
    ("pytest", "pytest"),
]


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def _check_packages() -> tuple[bool, str]:
    import_errors: list[str] = []
    for module_name, dist_name in REQUIRED_PACKAGES:
        try:
            importlib.import_module(module_name)
            version(dist_name)
        except (ImportError, PackageNotFoundError) as exc:
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        return _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    return _print_result("Required packages: all importable", True)


def main() -> int:
    results: list[str] = []
    all_passed = True
    temp_dir = tempfile.mkdtemp(prefix="hotel-booking-env-")

    # CHECK 1 - Python version >= 3.10
    if sys.version_info >= (3, 10):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.10",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2 - Required packages importable
    ok, line = _check_packages()
    results.append(line)
    all_passed = all_passed and ok

    try:
        settings = replace(
            get_settings(),
            database_path=Path(temp_dir) / "validation.db",
        )
        database = SqliteDatabase(settings)

        # CHECK 3 - Database initialization
        try:
            database.initialize_database()
            ok, line = _print_result("Database initialization", True)
        except RuntimeError as exc:
            ok, line = _print_result("Database initialization", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 4 - Demo data seeding
        room_repository = RoomRepository(database)
        booking_repository = BookingRepository(database)
        try:
            database.seed_demo_data()
            room_count = len(room_repository.get_all())
            expected_rooms = len(settings.demo_room_descriptions)
            if room_count != expected_rooms:
                raise RuntimeError(f"expected {expected_rooms} rooms, got {room_count}")
            ok, line = _print_result("Demo data seeding", True, f": {room_count} rooms")
        except RuntimeError as exc:
            ok, line = _print_result("Demo data seeding", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 5 - Allocation round trip
        manager = BookingManager(
            booking_repository=booking_repository,
            room_repository=room_repository,
        )
        try:
            occupied_day = date.today() + timedelta(days=settings.demo_occupied_start_offset_days)
            if manager.find_available_room(occupied_day, occupied_day) != NO_ROOM_AVAILABLE:
                raise RuntimeError("seeded fully occupied period reports a free room")
            free_day = date.today() + timedelta(days=settings.demo_occupied_end_offset_days + 1)
            booking = Booking(start_date=free_day, end_date=free_day, customer_id=1)
            if not manager.create_booking(booking):
                raise RuntimeError("no room allocated after the occupied period")
            ok, line = _print_result("Booking allocation", True, f": room {booking.room_id}")
        except (RuntimeError, ValueError) as exc:
            ok, line = _print_result("Booking allocation", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)

    print(SEPARATOR_LINE)
    print(" Hotel Booking Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
