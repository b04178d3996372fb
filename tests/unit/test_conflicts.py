"""Unit tests for room conflict checking."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from boxoffice.models.screening import Screening
from boxoffice.services.conflicts import find_conflicts, find_overlapping

UTC = timezone.utc


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 3, 1, hour, minute, tzinfo=UTC)


def make_screening(
    id: int,
    starts_at: datetime,
    ends_at: datetime,
    active: bool = True,
    room_id: int = 1,
) -> Screening:
    return Screening(
        id=id,
        film_id=1,
        room_id=room_id,
        starts_at=starts_at,
        ends_at=ends_at,
        base_price=Decimal("10.00"),
        seats_available=100,
        seats_reserved=0,
        active=active,
    )


class TestFindOverlapping:
    def test_overlapping_screening_is_a_conflict(self):
        a = make_screening(1, at(18), at(20, 30))
        assert find_overlapping([a], at(19), at(21)) == [a]

    def test_adjacent_screening_is_not_a_conflict(self):
        a = make_screening(1, at(18), at(20, 30))
        assert find_overlapping([a], at(20, 30), at(22, 30)) == []

    def test_inactive_screening_is_ignored(self):
        a = make_screening(1, at(18), at(20, 30), active=False)
        assert find_overlapping([a], at(19), at(21)) == []

    def test_screening_never_conflicts_with_itself(self):
        a = make_screening(1, at(18), at(20, 30))
        assert find_overlapping([a], at(18, 15), at(20, 45), exclude_screening_id=1) == []

    def test_returns_every_conflict(self):
        a = make_screening(1, at(14), at(16, 30))
        b = make_screening(2, at(17), at(19, 30))
        c = make_screening(3, at(20), at(22))
        assert find_overlapping([a, b, c], at(16), at(20, 15)) == [a, b, c]


async def test_find_conflicts_queries_room_and_filters():
    a = make_screening(1, at(18), at(20, 30))
    b = make_screening(2, at(21), at(23))
    result = MagicMock()
    result.scalars.return_value.all.return_value = [a, b]
    db = AsyncMock()
    db.execute = AsyncMock(return_value=result)

    conflicts = await find_conflicts(db, 1, at(19), at(20, 45))

    assert conflicts == [a]
    stmt = db.execute.await_args.args[0]
    sql = str(stmt.compile())
    assert "screenings.room_id" in sql
    assert "screenings.ends_at >" in sql


async def test_find_conflicts_excludes_edited_screening_in_query():
    result = MagicMock()
    result.scalars.return_value.all.return_value = []
    db = AsyncMock()
    db.execute = AsyncMock(return_value=result)

    await find_conflicts(db, 1, at(19), at(21), exclude_screening_id=5)

    sql = str(db.execute.await_args.args[0].compile())
    assert "screenings.id !=" in sql
