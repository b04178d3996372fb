"""Room catalogue: creating, editing and removing auditoriums."""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.exceptions import Conflict, InvalidOperation, NotFound
from boxoffice.models.room import Room, RoomType
from boxoffice.models.screening import Screening
from boxoffice.utils.money import to_money
from boxoffice.utils.timerange import utcnow

logger = logging.getLogger(__name__)

# Fields that stay editable while the room has active upcoming screenings
NON_STRUCTURAL_FIELDS = frozenset({"active", "surcharge", "equipment", "notes"})

ROOM_FIELDS = frozenset(
    {
        "number",
        "name",
        "room_type",
        "capacity",
        "rows",
        "seats_per_row",
        "surcharge",
        "active",
        "equipment",
        "notes",
    }
)


def resolve_capacity(rows: int, seats_per_row: int, capacity: int | None) -> int:
    """
    Work out a room's capacity from its layout.

    Args:
        rows: Number of seat rows
        seats_per_row: Seats in each row
        capacity: Declared capacity, if the caller supplied one

    Returns:
        rows × seats_per_row

    Raises:
        InvalidOperation: If the layout is empty or the declared capacity disagrees
    """
    if rows < 1 or seats_per_row < 1:
        raise InvalidOperation("A room needs at least one row and one seat per row")
    layout = rows * seats_per_row
    if capacity is not None and capacity != layout:
        raise InvalidOperation(
            f"Capacity {capacity} does not match {rows} rows × {seats_per_row} seats ({layout})"
        )
    return layout


async def get_room(db: AsyncSession, room_id: int, lock: bool = False) -> Room:
    """Load a room or raise NotFound."""
    room = await db.get(Room, room_id, with_for_update=True if lock else None)
    if room is None:
        raise NotFound("Room", room_id)
    return room


async def _ensure_number_free(db: AsyncSession, number: int, room_id: int | None = None) -> None:
    stmt = select(Room.id).where(Room.number == number)
    if room_id is not None:
        stmt = stmt.where(Room.id != room_id)
    result = await db.execute(stmt)
    if result.scalar_one_or_none() is not None:
        raise Conflict(f"Room number {number} is already taken")


async def count_upcoming_screenings(db: AsyncSession, room_id: int, now: datetime) -> int:
    """Count active screenings in the room that have not started yet."""
    stmt = select(func.count(Screening.id)).where(
        Screening.room_id == room_id,
        Screening.active.is_(True),
        Screening.starts_at >= now,
    )
    result = await db.execute(stmt)
    return int(result.scalar_one())


async def create_room(db: AsyncSession, fields: dict[str, Any]) -> Room:
    """
    Create a room.

    Raises:
        InvalidOperation: If the capacity does not match the layout
        Conflict: If the room number is taken
    """
    capacity = resolve_capacity(fields["rows"], fields["seats_per_row"], fields.get("capacity"))
    await _ensure_number_free(db, fields["number"])

    room = Room(
        number=fields["number"],
        name=fields["name"],
        room_type=fields.get("room_type") or RoomType.STANDARD,
        capacity=capacity,
        rows=fields["rows"],
        seats_per_row=fields["seats_per_row"],
        surcharge=to_money(fields.get("surcharge") or 0),
        active=fields.get("active", True),
        equipment=fields.get("equipment") or {},
        notes=fields.get("notes"),
    )
    db.add(room)
    await db.flush()
    logger.info(f"Created room {room.number} ({room.name}, {capacity} seats)")
    return room


async def update_room(
    db: AsyncSession,
    room_id: int,
    patch: dict[str, Any],
    now: datetime | None = None,
) -> Room:
    """
    Apply a partial update to a room.

    While the room has active upcoming screenings only status, surcharge,
    equipment and notes may change; anything else in the patch is dropped.

    Raises:
        NotFound: If the room does not exist
        InvalidOperation: If nothing editable remains, or the layout is inconsistent
        Conflict: If the new room number is taken
    """
    now = now or utcnow()
    room = await get_room(db, room_id, lock=True)

    unknown = set(patch) - ROOM_FIELDS
    if unknown:
        raise InvalidOperation(f"Unknown room fields: {sorted(unknown)}")

    upcoming = await count_upcoming_screenings(db, room_id, now)
    if upcoming:
        changes = {k: v for k, v in patch.items() if k in NON_STRUCTURAL_FIELDS}
        dropped = sorted(set(patch) - NON_STRUCTURAL_FIELDS)
        if not changes:
            raise InvalidOperation(
                f"Room {room.number} has {upcoming} upcoming screenings; only "
                f"{sorted(NON_STRUCTURAL_FIELDS)} can change (rejected: {dropped})"
            )
        if dropped:
            logger.info(f"Room {room.number} has upcoming screenings, ignoring fields {dropped}")
        patch = changes
    else:
        if "number" in patch and patch["number"] != room.number:
            await _ensure_number_free(db, patch["number"], room_id)
        if {"rows", "seats_per_row", "capacity"} & set(patch):
            patch = dict(patch)
            patch["capacity"] = resolve_capacity(
                patch.get("rows", room.rows),
                patch.get("seats_per_row", room.seats_per_row),
                patch.get("capacity"),
            )

    for field, value in patch.items():
        if field == "surcharge":
            value = to_money(value)
        setattr(room, field, value)

    await db.flush()
    logger.info(f"Updated room {room.number}: {sorted(patch)}")
    return room


async def delete_room(db: AsyncSession, room_id: int) -> None:
    """
    Delete a room that never hosted a screening.

    Raises:
        NotFound: If the room does not exist
        InvalidOperation: If any screening, past or future, references it
    """
    room = await get_room(db, room_id, lock=True)
    result = await db.execute(select(func.count(Screening.id)).where(Screening.room_id == room_id))
    screenings = int(result.scalar_one())
    if screenings:
        raise InvalidOperation(
            f"Room {room.number} has {screenings} screenings and cannot be deleted; deactivate it instead"
        )
    await db.delete(room)
    await db.flush()
    logger.info(f"Deleted room {room.number}")


async def list_rooms(db: AsyncSession, active: bool | None = None) -> list[Room]:
    """List rooms ordered by number."""
    stmt = select(Room).order_by(Room.number)
    if active is not None:
        stmt = stmt.where(Room.active.is_(active))
    result = await db.execute(stmt)
    return list(result.scalars().all())
