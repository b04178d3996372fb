"""Screening lifecycle: scheduling, rescheduling and removal of screenings."""

import logging
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.config import settings
from boxoffice.exceptions import InsufficientCapacity, InvalidOperation, NotFound, ScheduleConflict
from boxoffice.models.film import Film
from boxoffice.models.reservation import COMMITTED_STATUSES, Reservation
from boxoffice.models.room import Room
from boxoffice.models.screening import Screening
from boxoffice.services import inventory
from boxoffice.services.conflicts import find_conflicts
from boxoffice.utils.money import to_money
from boxoffice.utils.timerange import compute_end, utcnow

logger = logging.getLogger(__name__)

# Fields that stay editable once a screening has confirmed reservations
LOCKED_EDITABLE_FIELDS = frozenset({"active", "base_price"})

# Fields accepted in an unrestricted update
UPDATABLE_FIELDS = frozenset({"film_id", "room_id", "starts_at", "base_price", "active"})


async def get_screening(db: AsyncSession, screening_id: int, lock: bool = False) -> Screening:
    """Load a screening or raise NotFound. ``lock`` takes a FOR UPDATE row lock."""
    screening = await db.get(Screening, screening_id, with_for_update=True if lock else None)
    if screening is None:
        raise NotFound("Screening", screening_id)
    return screening


async def _get_film(db: AsyncSession, film_id: int) -> Film:
    film = await db.get(Film, film_id)
    if film is None:
        raise NotFound("Film", film_id)
    return film


async def _lock_room(db: AsyncSession, room_id: int) -> Room:
    # The room row lock serialises every schedule write for that room
    room = await db.get(Room, room_id, with_for_update=True)
    if room is None:
        raise NotFound("Room", room_id)
    return room


async def _ensure_slot_free(
    db: AsyncSession,
    room_id: int,
    starts_at: datetime,
    ends_at: datetime,
    exclude_screening_id: int | None = None,
) -> None:
    conflicts = await find_conflicts(db, room_id, starts_at, ends_at, exclude_screening_id)
    if conflicts:
        conflicting_ids = [s.id for s in conflicts]
        logger.warning(
            f"Refused slot {starts_at} to {ends_at} in room {room_id}: "
            f"overlaps screenings {conflicting_ids}"
        )
        raise ScheduleConflict(room_id, conflicting_ids)


async def count_committed_reservations(db: AsyncSession, screening_id: int) -> int:
    """Count reservations that lock the screening (confirmed, paid or used)."""
    stmt = select(func.count(Reservation.id)).where(
        Reservation.screening_id == screening_id,
        Reservation.status.in_(COMMITTED_STATUSES),
    )
    result = await db.execute(stmt)
    return int(result.scalar_one())


async def create_screening(
    db: AsyncSession,
    film_id: int,
    room_id: int,
    starts_at: datetime,
    base_price: Decimal,
) -> Screening:
    """
    Schedule a film into a room.

    Args:
        db: Database session
        film_id: Film to show
        room_id: Room to show it in
        starts_at: Timezone-aware start time
        base_price: Per-seat price before the room surcharge

    Returns:
        The new, active screening with every seat available

    Raises:
        NotFound: If the film or room does not exist
        InvalidOperation: If the film or room is inactive
        ScheduleConflict: If the slot overlaps another active screening in the room
    """
    film = await _get_film(db, film_id)
    room = await _lock_room(db, room_id)

    if not film.active:
        raise InvalidOperation(f"Film {film_id} is inactive and cannot be scheduled")
    if not room.active:
        raise InvalidOperation(f"Room {room_id} is inactive and cannot be scheduled")

    ends_at = compute_end(starts_at, film.duration_minutes, settings.cleanup_buffer_minutes)
    await _ensure_slot_free(db, room.id, starts_at, ends_at)

    screening = Screening(
        film_id=film.id,
        room_id=room.id,
        starts_at=starts_at,
        ends_at=ends_at,
        base_price=to_money(base_price),
        seats_available=room.capacity,
        seats_reserved=0,
        active=True,
    )
    db.add(screening)
    await db.flush()

    logger.info(
        f"Scheduled film {film.id} in room {room.number} "
        f"from {starts_at} to {ends_at} ({room.capacity} seats)"
    )
    return screening


async def update_screening(
    db: AsyncSession,
    screening_id: int,
    patch: dict[str, Any],
    now: datetime | None = None,
) -> Screening:
    """
    Apply a partial update to a screening.

    Once a screening has confirmed reservations only ``active`` and
    ``base_price`` may change; other fields in the patch are dropped and
    logged. Without confirmed reservations the whole patch applies, the end
    time is recomputed whenever the film or start changes, and moving to
    another room rebuilds the seat ledger from that room's capacity and the
    pending holds still in force.

    Args:
        db: Database session
        screening_id: Screening to edit
        patch: Field name to new value, only the fields being changed
        now: Current time (injectable for tests)

    Returns:
        The updated screening

    Raises:
        NotFound: If the screening, or a newly referenced film or room, is missing
        InvalidOperation: If the screening is locked and nothing editable remains
        ScheduleConflict: If the new slot overlaps another active screening
        InsufficientCapacity: If the pending holds do not fit the new room
    """
    now = now or utcnow()
    screening = await get_screening(db, screening_id, lock=True)
    committed = await count_committed_reservations(db, screening_id)

    if committed:
        return await _apply_locked_patch(db, screening, patch, committed)

    unknown = set(patch) - UPDATABLE_FIELDS
    if unknown:
        raise InvalidOperation(f"Unknown screening fields: {sorted(unknown)}")

    film_id = patch.get("film_id", screening.film_id)
    room_id = patch.get("room_id", screening.room_id)
    starts_at = patch.get("starts_at", screening.starts_at)
    active = patch.get("active", screening.active)

    ends_at = screening.ends_at
    if "film_id" in patch or "starts_at" in patch:
        film = await _get_film(db, film_id)
        ends_at = compute_end(starts_at, film.duration_minutes, settings.cleanup_buffer_minutes)

    room_changed = room_id != screening.room_id
    schedule_changed = (
        room_changed or starts_at != screening.starts_at or ends_at != screening.ends_at
    )
    reactivated = active and not screening.active

    new_room = None
    held = 0
    if room_changed:
        new_room = await _lock_room(db, room_id)
        if not new_room.active:
            raise InvalidOperation(f"Room {room_id} is inactive and cannot be scheduled")
        # Pending holds move with the screening and must still fit
        held = await inventory.count_held_seats(db, screening.id, now)
        if held > new_room.capacity:
            raise InsufficientCapacity(screening.id, held, new_room.capacity)

    if active and (schedule_changed or reactivated):
        if new_room is None:
            await _lock_room(db, room_id)
        await _ensure_slot_free(db, room_id, starts_at, ends_at, exclude_screening_id=screening.id)

    screening.film_id = film_id
    screening.starts_at = starts_at
    screening.ends_at = ends_at
    screening.active = active
    if "base_price" in patch:
        screening.base_price = to_money(patch["base_price"])

    if new_room is not None:
        # Only reachable without confirmed reservations; pending holds carry over
        screening.room_id = new_room.id
        inventory.reset(screening, new_room.capacity, held)

    await db.flush()
    logger.info(f"Updated screening {screening.id}: {sorted(patch)}")
    return screening


async def _apply_locked_patch(
    db: AsyncSession,
    screening: Screening,
    patch: dict[str, Any],
    committed: int,
) -> Screening:
    changes = {k: v for k, v in patch.items() if k in LOCKED_EDITABLE_FIELDS}
    dropped = sorted(set(patch) - LOCKED_EDITABLE_FIELDS)

    if not changes:
        raise InvalidOperation(
            f"Screening {screening.id} has {committed} confirmed reservations; "
            f"only {sorted(LOCKED_EDITABLE_FIELDS)} can change (rejected: {dropped})"
        )
    if dropped:
        logger.info(
            f"Screening {screening.id} has confirmed reservations, ignoring fields {dropped}"
        )

    if changes.get("active") and not screening.active:
        await _lock_room(db, screening.room_id)
        await _ensure_slot_free(
            db,
            screening.room_id,
            screening.starts_at,
            screening.ends_at,
            exclude_screening_id=screening.id,
        )

    if "active" in changes:
        screening.active = changes["active"]
    if "base_price" in changes:
        screening.base_price = to_money(changes["base_price"])

    await db.flush()
    logger.info(f"Updated locked screening {screening.id}: {sorted(changes)}")
    return screening


async def delete_screening(db: AsyncSession, screening_id: int) -> None:
    """
    Delete a screening that has no confirmed reservations.

    Pending, cancelled and expired reservations are purged with it.

    Raises:
        NotFound: If the screening does not exist
        InvalidOperation: If confirmed reservations exist
    """
    screening = await get_screening(db, screening_id, lock=True)
    committed = await count_committed_reservations(db, screening_id)
    if committed:
        raise InvalidOperation(
            f"Screening {screening_id} has {committed} confirmed reservations and cannot be deleted"
        )

    await db.execute(
        delete(Reservation).where(
            Reservation.screening_id == screening_id,
            Reservation.status.notin_(COMMITTED_STATUSES),
        )
    )
    await db.delete(screening)
    await db.flush()
    logger.info(f"Deleted screening {screening_id}")


async def list_screenings(
    db: AsyncSession,
    room_id: int | None = None,
    film_id: int | None = None,
    day: date | None = None,
    active: bool | None = None,
) -> list[Screening]:
    """List screenings ordered by start time, optionally filtered."""
    stmt = select(Screening).order_by(Screening.starts_at)
    if room_id is not None:
        stmt = stmt.where(Screening.room_id == room_id)
    if film_id is not None:
        stmt = stmt.where(Screening.film_id == film_id)
    if active is not None:
        stmt = stmt.where(Screening.active.is_(active))
    if day is not None:
        day_start = datetime.combine(day, time(0, 0), tzinfo=timezone.utc)
        stmt = stmt.where(
            Screening.starts_at >= day_start,
            Screening.starts_at < day_start + timedelta(days=1),
        )

    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_availability(
    db: AsyncSession,
    screening_id: int,
    now: datetime | None = None,
) -> dict[str, int]:
    """
    Report a screening's seats from the live reservation aggregate.

    Returns:
        Mapping with total, held and available seat counts
    """
    now = now or utcnow()
    screening = await get_screening(db, screening_id)
    held = await inventory.count_held_seats(db, screening_id, now)
    total = screening.total_seats
    return {
        "screening_id": screening_id,
        "total_seats": total,
        "held_seats": held,
        "available_seats": max(total - held, 0),
    }
