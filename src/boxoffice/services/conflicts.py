"""Room conflict checking: at most one active screening per room at any instant."""

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.models.screening import Screening
from boxoffice.utils.timerange import overlaps


def find_overlapping(
    screenings: Iterable[Screening],
    starts_at: datetime,
    ends_at: datetime,
    exclude_screening_id: int | None = None,
) -> list[Screening]:
    """
    Filter screenings down to the active ones overlapping [starts_at, ends_at).

    Args:
        screenings: Candidate screenings, normally all from one room
        starts_at: Start of the requested slot
        ends_at: End of the requested slot (exclusive)
        exclude_screening_id: Screening being edited, never a conflict with itself

    Returns:
        Screenings that would collide with the requested slot
    """
    return [
        screening
        for screening in screenings
        if screening.active
        and screening.id != exclude_screening_id
        and overlaps(screening.starts_at, screening.ends_at, starts_at, ends_at)
    ]


async def find_conflicts(
    db: AsyncSession,
    room_id: int,
    starts_at: datetime,
    ends_at: datetime,
    exclude_screening_id: int | None = None,
) -> list[Screening]:
    """
    Find active screenings in a room that overlap the requested slot.

    Callers must hold the room's row lock so the answer stays valid until
    their write is committed.

    Args:
        db: Database session
        room_id: Room to check
        starts_at: Start of the requested slot
        ends_at: End of the requested slot (exclusive)
        exclude_screening_id: Screening being edited, if any

    Returns:
        Conflicting screenings ordered by start time (empty when the slot is free)
    """
    stmt = (
        select(Screening)
        .where(
            Screening.room_id == room_id,
            Screening.active.is_(True),
            # Anything that ended before the slot starts cannot collide
            Screening.ends_at > starts_at,
        )
        .order_by(Screening.starts_at)
    )
    if exclude_screening_id is not None:
        stmt = stmt.where(Screening.id != exclude_screening_id)

    result = await db.execute(stmt)
    return find_overlapping(result.scalars().all(), starts_at, ends_at, exclude_screening_id)
