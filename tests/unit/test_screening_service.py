"""Unit tests for the screening lifecycle service."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from boxoffice.exceptions import InsufficientCapacity, InvalidOperation, NotFound, ScheduleConflict
from boxoffice.models.film import Film
from boxoffice.models.room import Room, RoomType
from boxoffice.models.screening import Screening
from boxoffice.services import screenings

UTC = timezone.utc


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 3, 1, hour, minute, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_film(id: int = 1, duration: int = 120, active: bool = True) -> Film:
    return Film(id=id, title="Nosferatu", duration_minutes=duration, active=active)


def make_room(id: int = 1, capacity: int = 100, active: bool = True) -> Room:
    return Room(
        id=id,
        number=id,
        name=f"Room {id}",
        room_type=RoomType.STANDARD,
        capacity=capacity,
        rows=capacity // 10,
        seats_per_row=10,
        surcharge=Decimal("0.00"),
        active=active,
    )


def make_screening(
    id: int = 1,
    starts_at: datetime | None = None,
    ends_at: datetime | None = None,
    room_id: int = 1,
    film_id: int = 1,
    active: bool = True,
    capacity: int = 100,
    reserved: int = 0,
) -> Screening:
    return Screening(
        id=id,
        film_id=film_id,
        room_id=room_id,
        starts_at=starts_at or at(18),
        ends_at=ends_at or at(20, 30),
        base_price=Decimal("10.00"),
        seats_available=capacity - reserved,
        seats_reserved=reserved,
        active=active,
    )


def scalar_result(value) -> MagicMock:
    r = MagicMock()
    r.scalar_one.return_value = value
    return r


def rows_result(items: list) -> MagicMock:
    r = MagicMock()
    r.scalars.return_value.all.return_value = items
    return r


def make_db(objects: list, results: list | None = None) -> AsyncMock:
    """Session mock: ``get`` looks objects up by (model, id), ``execute`` replays results."""
    store = {(type(o), o.id): o for o in objects}

    async def get(model, ident, **kwargs):
        return store.get((model, ident))

    db = AsyncMock()
    db.get = AsyncMock(side_effect=get)
    db.add = MagicMock()
    db.execute = AsyncMock(side_effect=list(results or []))
    return db


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class TestCreateScreening:
    async def test_end_time_is_runtime_plus_buffer(self):
        db = make_db([make_film(duration=120), make_room()], [rows_result([])])

        screening = await screenings.create_screening(db, 1, 1, at(18), Decimal("9.50"))

        assert screening.ends_at == at(20, 30)
        assert screening.seats_available == 100
        assert screening.seats_reserved == 0
        assert screening.active is True
        assert screening.base_price == Decimal("9.50")
        db.add.assert_called_once_with(screening)
        db.flush.assert_awaited_once()

    async def test_room_row_is_locked(self):
        db = make_db([make_film(), make_room()], [rows_result([])])

        await screenings.create_screening(db, 1, 1, at(18), Decimal("10"))

        db.get.assert_any_await(Room, 1, with_for_update=True)

    async def test_overlapping_slot_is_refused(self):
        a = make_screening(id=10, starts_at=at(18), ends_at=at(20, 30))
        db = make_db([make_film(duration=90), make_room()], [rows_result([a])])

        with pytest.raises(ScheduleConflict) as exc_info:
            await screenings.create_screening(db, 1, 1, at(19), Decimal("10"))

        assert exc_info.value.conflicting_ids == [10]
        db.add.assert_not_called()

    async def test_adjacent_slot_is_accepted(self):
        a = make_screening(id=10, starts_at=at(18), ends_at=at(20, 30))
        db = make_db([make_film(duration=120), make_room()], [rows_result([a])])

        screening = await screenings.create_screening(db, 1, 1, at(20, 30), Decimal("10"))

        assert screening.starts_at == at(20, 30)
        assert screening.ends_at == at(23)

    async def test_inactive_screening_does_not_block(self):
        a = make_screening(id=10, active=False)
        db = make_db([make_film(), make_room()], [rows_result([a])])

        await screenings.create_screening(db, 1, 1, at(19), Decimal("10"))

        db.add.assert_called_once()

    async def test_missing_film(self):
        db = make_db([make_room()])
        with pytest.raises(NotFound):
            await screenings.create_screening(db, 99, 1, at(18), Decimal("10"))

    async def test_missing_room(self):
        db = make_db([make_film()])
        with pytest.raises(NotFound):
            await screenings.create_screening(db, 1, 99, at(18), Decimal("10"))

    async def test_inactive_film_cannot_be_scheduled(self):
        db = make_db([make_film(active=False), make_room()])
        with pytest.raises(InvalidOperation):
            await screenings.create_screening(db, 1, 1, at(18), Decimal("10"))

    async def test_inactive_room_cannot_be_scheduled(self):
        db = make_db([make_film(), make_room(active=False)])
        with pytest.raises(InvalidOperation):
            await screenings.create_screening(db, 1, 1, at(18), Decimal("10"))


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


class TestUpdateLockedScreening:
    async def test_room_change_is_refused_with_confirmed_reservations(self):
        screening = make_screening()
        db = make_db([screening, make_room(2)], [scalar_result(1)])

        with pytest.raises(InvalidOperation):
            await screenings.update_screening(db, 1, {"room_id": 2})

        assert screening.room_id == 1

    async def test_base_price_stays_editable(self):
        screening = make_screening()
        db = make_db([screening], [scalar_result(1)])

        updated = await screenings.update_screening(db, 1, {"base_price": Decimal("12.5")})

        assert updated.base_price == Decimal("12.50")

    async def test_structural_fields_are_dropped_alongside_editable_ones(self):
        screening = make_screening()
        db = make_db([screening], [scalar_result(2)])

        await screenings.update_screening(
            db, 1, {"starts_at": at(21), "base_price": Decimal("11.00")}
        )

        assert screening.starts_at == at(18)
        assert screening.base_price == Decimal("11.00")

    async def test_deactivate(self):
        screening = make_screening()
        db = make_db([screening], [scalar_result(1)])

        await screenings.update_screening(db, 1, {"active": False})

        assert screening.active is False

    async def test_reactivation_checks_for_conflicts(self):
        screening = make_screening(active=False)
        other = make_screening(id=2, starts_at=at(19), ends_at=at(21))
        db = make_db([screening, make_room()], [scalar_result(1), rows_result([other])])

        with pytest.raises(ScheduleConflict):
            await screenings.update_screening(db, 1, {"active": True})

        assert screening.active is False


class TestUpdateUnlockedScreening:
    async def test_new_start_recomputes_end(self):
        screening = make_screening()
        db = make_db([screening, make_film(duration=100), make_room()], [scalar_result(0), rows_result([])])

        await screenings.update_screening(db, 1, {"starts_at": at(14)})

        assert screening.starts_at == at(14)
        assert screening.ends_at == at(16, 10)

    async def test_new_film_recomputes_end(self):
        screening = make_screening()
        db = make_db(
            [screening, make_film(), make_film(id=2, duration=60), make_room()],
            [scalar_result(0), rows_result([])],
        )

        await screenings.update_screening(db, 1, {"film_id": 2})

        assert screening.film_id == 2
        assert screening.ends_at == at(19, 30)

    async def test_reschedule_into_occupied_slot_is_refused(self):
        screening = make_screening()
        other = make_screening(id=2, starts_at=at(12), ends_at=at(14, 30))
        db = make_db(
            [screening, make_film(), make_room()],
            [scalar_result(0), rows_result([other])],
        )

        with pytest.raises(ScheduleConflict):
            await screenings.update_screening(db, 1, {"starts_at": at(13)})

        assert screening.starts_at == at(18)

    async def test_room_change_resets_ledger_to_new_capacity(self):
        # Counters still show 30 seats of holds that have since lapsed
        screening = make_screening(reserved=30)
        db = make_db(
            [screening, make_room(), make_room(2, capacity=50)],
            [scalar_result(0), scalar_result(0), rows_result([])],
        )

        await screenings.update_screening(db, 1, {"room_id": 2}, now=at(12))

        assert screening.room_id == 2
        assert screening.seats_available == 50
        assert screening.seats_reserved == 0

    async def test_room_change_carries_pending_holds_over(self):
        screening = make_screening(reserved=30)
        db = make_db(
            [screening, make_room(), make_room(2, capacity=50)],
            [scalar_result(0), scalar_result(30), rows_result([])],
        )

        await screenings.update_screening(db, 1, {"room_id": 2}, now=at(12))

        assert screening.room_id == 2
        assert screening.seats_reserved == 30
        assert screening.seats_available == 20

    async def test_room_too_small_for_pending_holds_is_refused(self):
        screening = make_screening(capacity=100, reserved=60)
        db = make_db(
            [screening, make_room(), make_room(2, capacity=50)],
            [scalar_result(0), scalar_result(60)],
        )

        with pytest.raises(InsufficientCapacity) as exc_info:
            await screenings.update_screening(db, 1, {"room_id": 2}, now=at(12))

        assert exc_info.value.requested == 60
        assert exc_info.value.available == 50
        assert screening.room_id == 1
        assert screening.total_seats == 100
        assert screening.seats_reserved == 60

    async def test_inactive_target_room_is_refused(self):
        screening = make_screening()
        db = make_db([screening, make_room(2, active=False)], [scalar_result(0)])

        with pytest.raises(InvalidOperation):
            await screenings.update_screening(db, 1, {"room_id": 2})

    async def test_price_only_update_skips_conflict_check(self):
        screening = make_screening()
        db = make_db([screening], [scalar_result(0)])

        await screenings.update_screening(db, 1, {"base_price": Decimal("8")})

        assert screening.base_price == Decimal("8.00")
        assert db.execute.await_count == 1

    async def test_unknown_field_is_refused(self):
        db = make_db([make_screening()], [scalar_result(0)])

        with pytest.raises(InvalidOperation):
            await screenings.update_screening(db, 1, {"ends_at": at(23)})

    async def test_missing_screening(self):
        db = make_db([])
        with pytest.raises(NotFound):
            await screenings.update_screening(db, 1, {"active": False})


# ---------------------------------------------------------------------------
# Delete / read
# ---------------------------------------------------------------------------


class TestDeleteScreening:
    async def test_refused_with_confirmed_reservations(self):
        screening = make_screening()
        db = make_db([screening], [scalar_result(3)])

        with pytest.raises(InvalidOperation):
            await screenings.delete_screening(db, 1)

        db.delete.assert_not_awaited()

    async def test_purges_other_reservations_and_deletes(self):
        screening = make_screening()
        db = make_db([screening], [scalar_result(0), MagicMock()])

        await screenings.delete_screening(db, 1)

        assert db.execute.await_count == 2
        purge_sql = str(db.execute.await_args_list[1].args[0].compile())
        assert purge_sql.startswith("DELETE FROM reservations")
        db.delete.assert_awaited_once_with(screening)


async def test_availability_comes_from_live_aggregate():
    # Counters are stale: they still include an expired hold
    screening = make_screening(reserved=40)
    db = make_db([screening], [scalar_result(25)])

    availability = await screenings.get_availability(db, 1, now=at(12))

    assert availability == {
        "screening_id": 1,
        "total_seats": 100,
        "held_seats": 25,
        "available_seats": 75,
    }


async def test_list_screenings_applies_filters():
    s = make_screening()
    db = make_db([], [rows_result([s])])

    result = await screenings.list_screenings(
        db, room_id=1, day=datetime(2026, 3, 1).date(), active=True
    )

    assert result == [s]
    sql = str(db.execute.await_args.args[0].compile())
    assert "screenings.room_id" in sql
    assert "screenings.starts_at >=" in sql
