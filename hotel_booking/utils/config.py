"""Runtime settings loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    database_path: Path
    log_level: str
    seed_demo_data: bool
    demo_room_descriptions: tuple[str, ...]
    demo_occupied_start_offset_days: int
    demo_occupied_end_offset_days: int
    occupancy_query_max_days: int


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process; tests derive variants with replace()."""
    return Settings(
        app_name=os.getenv("APP_NAME", "Hotel Booking Allocator"),
        app_version=os.getenv("APP_VERSION", "1.0.0"),
        database_path=Path(os.getenv("DATABASE_PATH", "data/hotel_booking.db")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        seed_demo_data=_env_flag("SEED_DEMO_DATA", True),
        demo_room_descriptions=("A", "B", "C"),
        demo_occupied_start_offset_days=10,
        demo_occupied_end_offset_days=20,
        occupancy_query_max_days=int(os.getenv("OCCUPANCY_QUERY_MAX_DAYS", "3660")),
    )
