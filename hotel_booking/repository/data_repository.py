"""SQLite-backed room catalog and booking store."""

from __future__ import annotations

import sqlite3
from contextlib import closing, contextmanager
from datetime import date, timedelta
from pathlib import Path
from typing import Iterator, Optional

from hotel_booking.domain.models import Booking, Room
from hotel_booking.repository.base import EntityInUseError, EntityNotFoundError, assign_id
from hotel_booking.utils.config import Settings, get_settings
from hotel_booking.utils.logger import get_logger


logger = get_logger(__name__)


class SqliteDatabase:
    """Connection factory plus schema and demo-data lifecycle."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._db_path = Path(self._settings.database_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def database_path(self) -> Path:
        return self._db_path

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection that commits or rolls back, then closes."""
        with closing(sqlite3.connect(self._db_path)) as connection:
            connection.row_factory = sqlite3.Row
            connection.execute("PRAGMA foreign_keys = ON;")
            with connection:
                yield connection

    def initialize_database(self) -> None:
        """Create tables and indexes; safe to call on every startup."""
        try:
            with self.connect() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Rooms (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        description TEXT NOT NULL
                    );
                    """
                )
                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Bookings (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        start_date TEXT NOT NULL,
                        end_date TEXT NOT NULL,
                        is_active INTEGER NOT NULL CHECK (is_active IN (0,1)),
                        customer_id INTEGER NOT NULL,
                        room_id INTEGER NOT NULL,
                        CHECK (start_date <= end_date),
                        FOREIGN KEY (room_id) REFERENCES Rooms(id)
                    );
                    """
                )
                cursor.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_bookings_room_dates
                    ON Bookings(room_id, start_date, end_date);
                    """
                )
                conn.commit()
            logger.info("Database initialized at %s", self._db_path)
        except sqlite3.Error as exc:
            raise RuntimeError(f"Database initialization failed: {exc}") from exc

    def seed_demo_data(self, today: Optional[date] = None) -> None:
        """Seed the demo catalog and a fully occupied period when Rooms is empty."""
        today = today or date.today()
        occupied_start = today + timedelta(days=self._settings.demo_occupied_start_offset_days)
        occupied_end = today + timedelta(days=self._settings.demo_occupied_end_offset_days)
        try:
            with self.connect() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) AS count FROM Rooms;")
                if int(cursor.fetchone()["count"]) > 0:
                    logger.info("Demo data already present; skipping seed")
                    return

                cursor.executemany(
                    "INSERT INTO Rooms (description) VALUES (?);",
                    [(description,) for description in self._settings.demo_room_descriptions],
                )
                cursor.execute("SELECT id FROM Rooms ORDER BY id ASC;")
                room_ids = [int(row["id"]) for row in cursor.fetchall()]

                booking_rows = [
                    (occupied_start.isoformat(), occupied_end.isoformat(), 1, customer_id, room_id)
                    for customer_id, room_id in enumerate(room_ids, start=1)
                ]
                if room_ids:
                    next_day = today + timedelta(days=1)
                    booking_rows.insert(
                        0, (next_day.isoformat(), next_day.isoformat(), 1, 1, room_ids[0])
                    )
                cursor.executemany(
                    """
                    INSERT INTO Bookings (start_date, end_date, is_active, customer_id, room_id)
                    VALUES (?, ?, ?, ?, ?);
                    """,
                    booking_rows,
                )
                conn.commit()
            logger.info(
                "Demo seed completed with %s rooms and %s bookings",
                len(room_ids),
                len(booking_rows),
            )
        except sqlite3.Error as exc:
            raise RuntimeError(f"Demo data seeding failed: {exc}") from exc


def _row_to_room(row: sqlite3.Row) -> Room:
    return Room(id=int(row["id"]), description=str(row["description"]))


def _row_to_booking(row: sqlite3.Row) -> Booking:
    return Booking(
        id=int(row["id"]),
        start_date=date.fromisoformat(row["start_date"]),
        end_date=date.fromisoformat(row["end_date"]),
        is_active=bool(row["is_active"]),
        customer_id=int(row["customer_id"]),
        room_id=int(row["room_id"]),
    )


class RoomRepository:
    """Room catalog; get_all returns rooms in ascending id order."""

    def __init__(self, database: SqliteDatabase) -> None:
        self._database = database

    def get_all(self) -> list[Room]:
        with self._database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT id, description FROM Rooms ORDER BY id ASC;")
            return [_row_to_room(row) for row in cursor.fetchall()]

    def get(self, entity_id: int) -> Optional[Room]:
        with self._database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, description FROM Rooms WHERE id = ?;",
                (entity_id,),
            )
            row = cursor.fetchone()
            if row is None:
                return None
            return _row_to_room(row)

    def add(self, entity: Room) -> Room:
        with self._database.connect() as conn:
            cursor = conn.cursor()
            if entity.id is None:
                cursor.execute(
                    "INSERT INTO Rooms (description) VALUES (?);",
                    (entity.description,),
                )
            else:
                cursor.execute(
                    "INSERT INTO Rooms (id, description) VALUES (?, ?);",
                    (entity.id, entity.description),
                )
            conn.commit()
            return assign_id(entity, int(cursor.lastrowid))

    def edit(self, entity: Room) -> None:
        with self._database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE Rooms SET description = ? WHERE id = ?;",
                (entity.description, entity.id),
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise EntityNotFoundError(f"No room with id {entity.id}")

    def remove(self, entity_id: int) -> None:
        try:
            with self._database.connect() as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM Rooms WHERE id = ?;", (entity_id,))
                conn.commit()
                removed = cursor.rowcount
        except sqlite3.IntegrityError as exc:
            raise EntityInUseError(f"Room {entity_id} still has bookings") from exc
        if removed == 0:
            raise EntityNotFoundError(f"No room with id {entity_id}")


class BookingRepository:
    def __init__(self, database: SqliteDatabase) -> None:
        self._database = database

    def get_all(self) -> list[Booking]:
        with self._database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, start_date, end_date, is_active, customer_id, room_id
                FROM Bookings
                ORDER BY id ASC;
                """
            )
            return [_row_to_booking(row) for row in cursor.fetchall()]

    def get(self, entity_id: int) -> Optional[Booking]:
        with self._database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, start_date, end_date, is_active, customer_id, room_id
                FROM Bookings
                WHERE id = ?;
                """,
                (entity_id,),
            )
            row = cursor.fetchone()
            if row is None:
                return None
            return _row_to_booking(row)

    def add(self, entity: Booking) -> Booking:
        with self._database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO Bookings (id, start_date, end_date, is_active, customer_id, room_id)
                VALUES (?, ?, ?, ?, ?, ?);
                """,
                (
                    entity.id,
                    entity.start_date.isoformat(),
                    entity.end_date.isoformat(),
                    int(entity.is_active),
                    entity.customer_id,
                    entity.room_id,
                ),
            )
            conn.commit()
            return assign_id(entity, int(cursor.lastrowid))

    def edit(self, entity: Booking) -> None:
        with self._database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE Bookings
                SET start_date = ?,
                    end_date = ?,
                    is_active = ?,
                    customer_id = ?,
                    room_id = ?
                WHERE id = ?;
                """,
                (
                    entity.start_date.isoformat(),
                    entity.end_date.isoformat(),
                    int(entity.is_active),
                    entity.customer_id,
                    entity.room_id,
                    entity.id,
                ),
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise EntityNotFoundError(f"No booking with id {entity.id}")

    def remove(self, entity_id: int) -> None:
        with self._database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM Bookings WHERE id = ?;", (entity_id,))
            conn.commit()
            if cursor.rowcount == 0:
                raise EntityNotFoundError(f"No booking with id {entity_id}")
