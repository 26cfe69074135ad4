from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta

from fastapi import FastAPI
from fastapi.testclient import TestClient

from app import create_app
from hotel_booking.controllers.booking_controller import router as booking_router
from hotel_booking.utils.config import get_settings


def _build_test_settings(tmp_path, filename: str, seed_demo_data: bool = True):
    get_settings.cache_clear()
    base = get_settings()
    return replace(
        base,
        database_path=tmp_path / filename,
        seed_demo_data=seed_demo_data,
    )


def _day(offset: int) -> str:
    return (date.today() + timedelta(days=offset)).isoformat()


def test_booking_end_to_end_flow(tmp_path):
    app = create_app(_build_test_settings(tmp_path, "booking_flow.db"))

    with TestClient(app) as client:
        rooms_response = client.get("/rooms")
        assert rooms_response.status_code == 200
        assert [room["description"] for room in rooms_response.json()] == ["A", "B", "C"]

        occupied_response = client.get(
            "/bookings/fully_occupied_dates",
            params={"start_date": _day(9), "end_date": _day(21)},
        )
        assert occupied_response.status_code == 200
        assert occupied_response.json()["dates"] == [_day(offset) for offset in range(10, 21)]

        available_response = client.get(
            "/rooms/available",
            params={"start_date": _day(15), "end_date": _day(15)},
        )
        assert available_response.status_code == 200
        assert available_response.json() == {"room_id": None}

        conflict_response = client.post(
            "/bookings",
            json={"start_date": _day(12), "end_date": _day(13), "customer_id": 5},
        )
        assert conflict_response.status_code == 409
        assert "All rooms are occupied" in conflict_response.json()["detail"]

        before = len(client.get("/bookings").json())
        create_response = client.post(
            "/bookings",
            json={"start_date": _day(21), "end_date": _day(23), "customer_id": 5},
        )
        assert create_response.status_code == 201
        created = create_response.json()
        assert created["room_id"] == 1
        assert created["is_active"] is True
        assert len(client.get("/bookings").json()) == before + 1

        booking_response = client.get(f"/bookings/{created['id']}")
        assert booking_response.status_code == 200
        assert booking_response.json() == created


def test_create_booking_rejects_start_date_today(tmp_path):
    app = create_app(_build_test_settings(tmp_path, "booking_today.db"))

    with TestClient(app) as client:
        response = client.post(
            "/bookings",
            json={"start_date": _day(0), "end_date": _day(1), "customer_id": 1},
        )

    assert response.status_code == 400


def test_fully_occupied_dates_rejects_reversed_range(tmp_path):
    app = create_app(_build_test_settings(tmp_path, "booking_reversed.db"))

    with TestClient(app) as client:
        response = client.get(
            "/bookings/fully_occupied_dates",
            params={"start_date": _day(5), "end_date": _day(4)},
        )

    assert response.status_code == 400


def test_update_and_delete_booking(tmp_path):
    app = create_app(_build_test_settings(tmp_path, "booking_edit.db"))

    with TestClient(app) as client:
        first_booking = client.get("/bookings").json()[0]

        update_response = client.put(
            f"/bookings/{first_booking['id']}",
            json={
                "start_date": first_booking["start_date"],
                "end_date": first_booking["end_date"],
                "customer_id": first_booking["customer_id"],
                "is_active": False,
            },
        )
        assert update_response.status_code == 204
        assert client.get(f"/bookings/{first_booking['id']}").json()["is_active"] is False

        delete_response = client.delete(f"/bookings/{first_booking['id']}")
        assert delete_response.status_code == 204
        assert client.get(f"/bookings/{first_booking['id']}").status_code == 404
        assert client.delete(f"/bookings/{first_booking['id']}").status_code == 404
        assert client.put(
            f"/bookings/{first_booking['id']}",
            json={
                "start_date": _day(1),
                "end_date": _day(1),
                "customer_id": 1,
                "is_active": True,
            },
        ).status_code == 404


def test_room_catalog_management(tmp_path):
    app = create_app(_build_test_settings(tmp_path, "rooms.db", seed_demo_data=False))

    with TestClient(app) as client:
        assert client.get("/rooms").json() == []
        assert client.get(
            "/rooms/available",
            params={"start_date": _day(1), "end_date": _day(2)},
        ).json() == {"room_id": None}

        create_response = client.post("/rooms", json={"description": "Sea view"})
        assert create_response.status_code == 201
        room = create_response.json()
        assert client.get(f"/rooms/{room['id']}").json() == room

        booking_response = client.post(
            "/bookings",
            json={"start_date": _day(1), "end_date": _day(2), "customer_id": 3},
        )
        assert booking_response.status_code == 201
        assert client.delete(f"/rooms/{room['id']}").status_code == 409

        client.delete(f"/bookings/{booking_response.json()['id']}")
        assert client.delete(f"/rooms/{room['id']}").status_code == 204
        assert client.get(f"/rooms/{room['id']}").status_code == 404


def test_missing_state_returns_service_unavailable():
    app = FastAPI()
    app.include_router(booking_router)
    client = TestClient(app)

    assert client.get("/rooms").status_code == 503
    assert client.get("/bookings").status_code == 503


def test_update_booking_rejects_double_booking_a_room(tmp_path):
    app = create_app(_build_test_settings(tmp_path, "booking_overlap.db", seed_demo_data=False))

    with TestClient(app) as client:
        client.post("/rooms", json={"description": "Single"})
        first = client.post(
            "/bookings",
            json={"start_date": _day(1), "end_date": _day(3), "customer_id": 1},
        ).json()
        second = client.post(
            "/bookings",
            json={"start_date": _day(5), "end_date": _day(6), "customer_id": 2},
        ).json()
        assert first["room_id"] == second["room_id"]

        overlap_response = client.put(
            f"/bookings/{second['id']}",
            json={"start_date": _day(2), "end_date": _day(6), "customer_id": 2, "is_active": True},
        )
        assert overlap_response.status_code == 409
        assert client.get(f"/bookings/{second['id']}").json() == second

        move_response = client.put(
            f"/bookings/{second['id']}",
            json={"start_date": _day(4), "end_date": _day(7), "customer_id": 2, "is_active": True},
        )
        assert move_response.status_code == 204
        assert client.get(f"/bookings/{second['id']}").json()["start_date"] == _day(4)


def test_fully_occupied_dates_accepts_last_calendar_day(tmp_path):
    app = create_app(_build_test_settings(tmp_path, "booking_max_day.db"))

    with TestClient(app) as client:
        response = client.get(
            "/bookings/fully_occupied_dates",
            params={"start_date": "9999-12-31", "end_date": "9999-12-31"},
        )

    assert response.status_code == 200
    assert response.json() == {"dates": []}


def test_fully_occupied_dates_rejects_oversized_range(tmp_path):
    settings = replace(
        _build_test_settings(tmp_path, "booking_span.db"),
        occupancy_query_max_days=30,
    )
    app = create_app(settings)

    with TestClient(app) as client:
        too_long = client.get(
            "/bookings/fully_occupied_dates",
            params={"start_date": "0001-01-01", "end_date": "9999-12-31"},
        )
        within_limit = client.get(
            "/bookings/fully_occupied_dates",
            params={"start_date": _day(0), "end_date": _day(29)},
        )

    assert too_long.status_code == 400
    assert within_limit.status_code == 200
    assert within_limit.json()["dates"] == [_day(offset) for offset in range(10, 21)]
