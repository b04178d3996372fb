"""Scheduled sweep that persists the expiry of abandoned pending reservations.

Capacity checks already ignore overdue holds, so this job only tidies up:
it records the expired status and brings the seat counters of the affected
screenings back in line with the live aggregate.
"""

import logging
from collections import defaultdict
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.database import AsyncSessionLocal
from boxoffice.models.reservation import Reservation, ReservationStatus
from boxoffice.models.screening import Screening
from boxoffice.services import inventory
from boxoffice.utils.timerange import utcnow

logger = logging.getLogger(__name__)


async def expire_overdue_reservations(db: AsyncSession, now: datetime) -> int:
    """
    Mark every overdue pending reservation as expired.

    Args:
        db: Database session (not committed here)
        now: Reference time

    Returns:
        Number of reservations expired
    """
    stmt = (
        select(Reservation)
        .where(
            Reservation.status == ReservationStatus.PENDING,
            Reservation.expires_at <= now,
        )
        .order_by(Reservation.screening_id)
        .with_for_update(skip_locked=True)
    )
    result = await db.execute(stmt)
    overdue = result.scalars().all()

    by_screening: dict[int, list[Reservation]] = defaultdict(list)
    for reservation in overdue:
        by_screening[reservation.screening_id].append(reservation)

    for screening_id, reservations in by_screening.items():
        screening = await db.get(Screening, screening_id, with_for_update=True)
        for reservation in reservations:
            reservation.status = ReservationStatus.EXPIRED
        if screening is None:
            continue
        held = await inventory.count_held_seats(db, screening_id, now)
        inventory.release(screening, held, 0)
        logger.info(
            f"Expired {len(reservations)} reservations for screening {screening_id}, "
            f"{screening.seats_available} seats available"
        )

    await db.flush()
    return len(overdue)


async def run_expiry_sweep() -> None:
    """Expire overdue reservations in a session of its own.

    Called from the scheduler, outside any request context.
    """
    async with AsyncSessionLocal() as db:
        try:
            expired = await expire_overdue_reservations(db, utcnow())
            await db.commit()
        except Exception as e:
            logger.error(f"Reservation expiry sweep failed: {e}", exc_info=True)
            await db.rollback()
            return

    if expired:
        logger.info(f"Expiry sweep complete: {expired} reservations expired")
