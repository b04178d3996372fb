"""Tests for the screenings API endpoints."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from boxoffice.database import get_db
from boxoffice.models.film import Film
from boxoffice.models.room import Room, RoomType
from boxoffice.models.screening import Screening

UTC = timezone.utc


# ---------------------------------------------------------------------------
# Test data helpers
# ---------------------------------------------------------------------------


def make_film(duration: int = 120) -> Film:
    return Film(id=1, title="Nosferatu", duration_minutes=duration, active=True)


def make_room() -> Room:
    return Room(
        id=1,
        number=1,
        name="Room 1",
        room_type=RoomType.STANDARD,
        capacity=100,
        rows=10,
        seats_per_row=10,
        surcharge=Decimal("0.00"),
        active=True,
    )


def make_screening(id: int = 1, hour: int = 18) -> Screening:
    return Screening(
        id=id,
        film_id=1,
        room_id=1,
        starts_at=datetime(2026, 3, 1, hour, 0, tzinfo=UTC),
        ends_at=datetime(2026, 3, 1, hour + 2, 30, tzinfo=UTC),
        base_price=Decimal("10.00"),
        seats_available=100,
        seats_reserved=0,
        active=True,
    )


def make_db_override(objects: list, results: list):
    store = {(type(o), o.id): o for o in objects}

    async def get(model, ident, **kwargs):
        return store.get((model, ident))

    async def flush():
        # Mimic the database assigning a primary key on insert
        for call in db.add.call_args_list:
            obj = call.args[0]
            if obj.id is None:
                obj.id = 42

    db = AsyncMock()
    db.get = AsyncMock(side_effect=get)
    db.add = MagicMock()
    db.flush = AsyncMock(side_effect=flush)
    db.execute = AsyncMock(side_effect=list(results))

    async def override():
        yield db

    return override


def rows_result(items: list) -> MagicMock:
    r = MagicMock()
    r.scalars.return_value.all.return_value = items
    return r


def scalar_result(value) -> MagicMock:
    r = MagicMock()
    r.scalar_one.return_value = value
    return r


async def request(app: FastAPI, method: str, url: str, **kwargs):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        return await client.request(method, url, **kwargs)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


async def test_create_screening_derives_end_time(test_app: FastAPI) -> None:
    test_app.dependency_overrides[get_db] = make_db_override(
        [make_film(), make_room()], [rows_result([])]
    )
    try:
        response = await request(
            test_app,
            "POST",
            "/api/screenings",
            json={
                "film_id": 1,
                "room_id": 1,
                "starts_at": "2026-03-01T18:00:00Z",
                "base_price": "9.50",
            },
        )
    finally:
        test_app.dependency_overrides.clear()

    assert response.status_code == 201
    data = response.json()
    assert data["id"] == 42
    assert data["ends_at"].startswith("2026-03-01T20:30:00")
    assert data["seats_available"] == 100


async def test_overlapping_screening_answers_409(test_app: FastAPI) -> None:
    test_app.dependency_overrides[get_db] = make_db_override(
        [make_film(duration=90), make_room()], [rows_result([make_screening(id=7)])]
    )
    try:
        response = await request(
            test_app,
            "POST",
            "/api/screenings",
            json={
                "film_id": 1,
                "room_id": 1,
                "starts_at": "2026-03-01T19:00:00Z",
                "base_price": "9.50",
            },
        )
    finally:
        test_app.dependency_overrides.clear()

    assert response.status_code == 409
    assert "7" in response.json()["detail"]


async def test_naive_start_time_is_rejected(test_app: FastAPI) -> None:
    test_app.dependency_overrides[get_db] = make_db_override([], [])
    try:
        response = await request(
            test_app,
            "POST",
            "/api/screenings",
            json={"film_id": 1, "room_id": 1, "starts_at": "2026-03-01T18:00:00", "base_price": "9"},
        )
    finally:
        test_app.dependency_overrides.clear()

    assert response.status_code == 422


async def test_missing_screening_answers_404(test_app: FastAPI) -> None:
    test_app.dependency_overrides[get_db] = make_db_override([], [])
    try:
        response = await request(test_app, "GET", "/api/screenings/5")
    finally:
        test_app.dependency_overrides.clear()

    assert response.status_code == 404
    assert response.json() == {"detail": "Screening 5 not found"}


async def test_locked_screening_room_change_answers_400(test_app: FastAPI) -> None:
    test_app.dependency_overrides[get_db] = make_db_override(
        [make_screening()], [scalar_result(1)]
    )
    try:
        response = await request(test_app, "PATCH", "/api/screenings/1", json={"room_id": 2})
    finally:
        test_app.dependency_overrides.clear()

    assert response.status_code == 400


async def test_availability(test_app: FastAPI) -> None:
    test_app.dependency_overrides[get_db] = make_db_override(
        [make_screening()], [scalar_result(30)]
    )
    try:
        response = await request(test_app, "GET", "/api/screenings/1/availability")
    finally:
        test_app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json() == {
        "screening_id": 1,
        "total_seats": 100,
        "held_seats": 30,
        "available_seats": 70,
    }


async def test_list_screenings(test_app: FastAPI) -> None:
    test_app.dependency_overrides[get_db] = make_db_override(
        [], [rows_result([make_screening(1, 14), make_screening(2, 18)])]
    )
    try:
        response = await request(test_app, "GET", "/api/screenings?room_id=1&date=2026-03-01")
    finally:
        test_app.dependency_overrides.clear()

    assert response.status_code == 200
    assert [s["id"] for s in response.json()] == [1, 2]


async def test_delete_screening(test_app: FastAPI) -> None:
    test_app.dependency_overrides[get_db] = make_db_override(
        [make_screening()], [scalar_result(0), MagicMock()]
    )
    try:
        response = await request(test_app, "DELETE", "/api/screenings/1")
    finally:
        test_app.dependency_overrides.clear()

    assert response.status_code == 204
