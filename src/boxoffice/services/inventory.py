"""Seat inventory ledger for screenings.

Each screening carries two counters, seats_available and seats_reserved,
whose sum is the screening's total seats. The counters are never adjusted
blindly: every write starts from ``held``, the number of seats that
seat-holding reservations occupy according to a fresh aggregate taken while
the screening row is locked, and rewrites both counters from it. Drift from
lazily expired holds is therefore corrected on the next write.
"""

import logging
from datetime import datetime

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.exceptions import InsufficientCapacity, InvalidOperation
from boxoffice.models.reservation import (
    SEAT_HOLDING_STATUSES,
    Reservation,
    ReservationStatus,
)
from boxoffice.models.screening import Screening

logger = logging.getLogger(__name__)


def holding_clause(now: datetime):
    """SQL condition matching reservations that currently occupy seats."""
    settled = [s for s in SEAT_HOLDING_STATUSES if s != ReservationStatus.PENDING]
    return or_(
        Reservation.status.in_(settled),
        and_(
            Reservation.status == ReservationStatus.PENDING,
            or_(Reservation.expires_at.is_(None), Reservation.expires_at > now),
        ),
    )


async def count_held_seats(db: AsyncSession, screening_id: int, now: datetime) -> int:
    """
    Sum the seats currently held for a screening.

    Pending reservations past their expiry are left out, so an abandoned
    hold frees its seats as soon as it times out.

    Args:
        db: Database session
        screening_id: Screening to aggregate
        now: Reference time for expiry

    Returns:
        Number of held seats
    """
    stmt = select(func.coalesce(func.sum(Reservation.quantity), 0)).where(
        Reservation.screening_id == screening_id,
        holding_clause(now),
    )
    result = await db.execute(stmt)
    return int(result.scalar_one())


def _check_quantity(quantity: int) -> None:
    if quantity < 1:
        raise InvalidOperation(f"Seat quantity must be at least 1, got {quantity}")


def _set_reserved(screening: Screening, reserved: int) -> None:
    capacity = screening.total_seats
    screening.seats_reserved = reserved
    screening.seats_available = capacity - reserved


def reserve(screening: Screening, held: int, quantity: int) -> None:
    """
    Debit seats for a new reservation.

    Args:
        screening: Locked screening row
        held: Seats already held (from count_held_seats)
        quantity: Seats requested

    Raises:
        InsufficientCapacity: If the request does not fit
    """
    _check_quantity(quantity)
    capacity = screening.total_seats
    if held + quantity > capacity:
        raise InsufficientCapacity(screening.id, quantity, max(capacity - held, 0))
    _set_reserved(screening, held + quantity)


def release(screening: Screening, held: int, quantity: int) -> None:
    """
    Credit seats back when a seat-holding reservation stops holding them.

    Args:
        screening: Locked screening row
        held: Seats held before the release, including ``quantity``
        quantity: Seats being given back (0 if the reservation no longer counted)
    """
    _set_reserved(screening, min(max(held - quantity, 0), screening.total_seats))


def resize(screening: Screening, held: int, old_quantity: int, new_quantity: int) -> None:
    """
    Apply the net change of a reservation switching from old to new quantity.

    Args:
        screening: Locked screening row
        held: Seats held, including ``old_quantity``
        old_quantity: Seats the reservation currently holds (0 if it no longer counts)
        new_quantity: Seats it should hold

    Raises:
        InsufficientCapacity: If the larger block does not fit
    """
    _check_quantity(new_quantity)
    others = max(held - old_quantity, 0)
    capacity = screening.total_seats
    if others + new_quantity > capacity:
        raise InsufficientCapacity(
            screening.id, new_quantity - old_quantity, max(capacity - held, 0)
        )
    _set_reserved(screening, others + new_quantity)


def reset(screening: Screening, capacity: int, held: int = 0) -> None:
    """
    Reinitialise the ledger for a new room.

    Args:
        screening: Locked screening row
        capacity: Seats in the new room
        held: Seats still held by reservations that move with the screening

    Raises:
        InsufficientCapacity: If the held seats do not fit the new room
    """
    if held > capacity:
        raise InsufficientCapacity(screening.id, held, capacity)
    logger.info(
        f"Resetting seat ledger of screening {screening.id}: "
        f"capacity {capacity}, {held} seats carried over"
    )
    screening.seats_available = capacity
    screening.seats_reserved = 0
    _set_reserved(screening, held)
