"""Reservation lifecycle: holds, status transitions, resizing and removal.

Status flow::

    pending ──► confirmed ──► paid
       │            │
       ├──► cancelled ◄┘
       ├──► expired     (only once the hold has timed out)
       └──► used ◄── confirmed

paid, cancelled, used and expired are terminal. Every operation that moves
seats locks the screening row and works from a fresh held-seat aggregate
(see ``inventory``).
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.config import settings
from boxoffice.exceptions import InvalidOperation, InvalidTransition, NotFound
from boxoffice.models.customer import Customer
from boxoffice.models.reservation import PaymentMethod, Reservation, ReservationStatus
from boxoffice.models.room import Room
from boxoffice.models.screening import Screening
from boxoffice.services import inventory
from boxoffice.services.screenings import get_screening
from boxoffice.utils.codes import generate_reservation_code
from boxoffice.utils.money import seat_total
from boxoffice.utils.timerange import utcnow

logger = logging.getLogger(__name__)

S = ReservationStatus

ALLOWED_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    S.PENDING: frozenset({S.CONFIRMED, S.CANCELLED, S.EXPIRED, S.USED}),
    S.CONFIRMED: frozenset({S.PAID, S.CANCELLED, S.USED}),
    S.PAID: frozenset(),
    S.CANCELLED: frozenset(),
    S.USED: frozenset(),
    S.EXPIRED: frozenset(),
}

# Transitions that give the seats back
RELEASING_STATUSES = frozenset({S.CANCELLED, S.EXPIRED})

RESIZABLE_STATUSES = frozenset({S.PENDING, S.CONFIRMED})


def check_transition(current: ReservationStatus, target: ReservationStatus) -> None:
    """Raise InvalidTransition unless ``current -> target`` is part of the lifecycle."""
    if target not in ALLOWED_TRANSITIONS[ReservationStatus(current)]:
        raise InvalidTransition(ReservationStatus(current).value, ReservationStatus(target).value)


async def get_reservation(db: AsyncSession, reservation_id: int, lock: bool = False) -> Reservation:
    """Load a reservation or raise NotFound."""
    reservation = await db.get(Reservation, reservation_id, with_for_update=True if lock else None)
    if reservation is None:
        raise NotFound("Reservation", reservation_id)
    return reservation


async def _get_room(db: AsyncSession, room_id: int) -> Room:
    room = await db.get(Room, room_id)
    if room is None:
        raise NotFound("Room", room_id)
    return room


def _expire_if_overdue(
    screening: Screening,
    reservation: Reservation,
    held: int,
    now: datetime,
) -> bool:
    # An overdue hold is already missing from ``held``, so nothing is subtracted;
    # the release only brings the cached counters in line with the aggregate.
    if not reservation.is_overdue(now):
        return False
    reservation.status = S.EXPIRED
    inventory.release(screening, held, 0)
    logger.info(f"Reservation {reservation.code} expired at {reservation.expires_at}")
    return True


async def create_reservation(
    db: AsyncSession,
    customer_id: int,
    screening_id: int,
    quantity: int,
    payment_method: PaymentMethod | None = None,
    notes: str | None = None,
    now: datetime | None = None,
) -> Reservation:
    """
    Hold seats for a customer.

    Args:
        db: Database session
        customer_id: Customer booking the seats
        screening_id: Screening to book
        quantity: Number of seats (at least 1)
        payment_method: Intended payment method, if known
        notes: Free-text notes
        now: Current time (injectable for tests)

    Returns:
        The new pending reservation, priced and with its hold expiry set

    Raises:
        NotFound: If the screening or an active customer does not exist
        InvalidOperation: If the screening is inactive or already started
        InsufficientCapacity: If the seats do not fit
    """
    now = now or utcnow()
    if quantity < 1:
        raise InvalidOperation(f"Seat quantity must be at least 1, got {quantity}")

    screening = await get_screening(db, screening_id, lock=True)
    if not screening.active:
        raise InvalidOperation(f"Screening {screening_id} is not open for booking")
    if screening.starts_at <= now:
        raise InvalidOperation(f"Screening {screening_id} has already started")

    customer = await db.get(Customer, customer_id)
    if customer is None or not customer.active:
        raise NotFound("Customer", customer_id)

    room = await _get_room(db, screening.room_id)

    held = await inventory.count_held_seats(db, screening.id, now)
    inventory.reserve(screening, held, quantity)

    total = seat_total(screening.base_price, room.surcharge, quantity)
    reservation = Reservation(
        code=generate_reservation_code(),
        customer_id=customer.id,
        screening_id=screening.id,
        quantity=quantity,
        subtotal=total,
        total=total,
        status=S.PENDING,
        payment_method=payment_method,
        notes=notes,
        created_at=now,
        expires_at=now + timedelta(minutes=settings.reservation_hold_minutes),
    )
    db.add(reservation)
    await db.flush()

    logger.info(
        f"Reservation {reservation.code}: {quantity} seats for screening {screening.id}, "
        f"{screening.seats_available} left"
    )
    return reservation


async def transition_reservation(
    db: AsyncSession,
    reservation_id: int,
    target: ReservationStatus,
    actor: str | None = None,
    now: datetime | None = None,
) -> Reservation:
    """
    Move a reservation to a new status.

    An overdue pending reservation is expired first, so confirming it fails
    and asking for ``expired`` simply returns it.

    Args:
        db: Database session
        reservation_id: Reservation to move
        target: Desired status
        actor: Staff member performing the change, recorded on payment
        now: Current time (injectable for tests)

    Raises:
        NotFound: If the reservation does not exist
        InvalidTransition: If the lifecycle does not allow the change
    """
    now = now or utcnow()
    target = ReservationStatus(target)

    reservation = await get_reservation(db, reservation_id, lock=True)
    screening = await get_screening(db, reservation.screening_id, lock=True)
    held = await inventory.count_held_seats(db, screening.id, now)

    expired = _expire_if_overdue(screening, reservation, held, now)
    if expired and target == S.EXPIRED:
        await db.flush()
        return reservation

    if target == S.EXPIRED and reservation.status == S.PENDING:
        # Still inside its hold window
        raise InvalidTransition(reservation.status.value, target.value)

    check_transition(reservation.status, target)

    if target in RELEASING_STATUSES:
        released = reservation.quantity if reservation.holds_seats(now) else 0
        inventory.release(screening, held, released)
    if target == S.PAID:
        reservation.paid_at = now
        reservation.confirmed_by = actor

    previous = reservation.status
    reservation.status = target
    await db.flush()

    logger.info(
        f"Reservation {reservation.code}: {ReservationStatus(previous).value} -> {target.value}"
        + (f" by {actor}" if actor else "")
    )
    return reservation


async def resize_reservation(
    db: AsyncSession,
    reservation_id: int,
    quantity: int,
    now: datetime | None = None,
) -> Reservation:
    """
    Change the number of seats on a pending or confirmed reservation.

    The price is recomputed from the screening's current base price and the
    room surcharge.

    Raises:
        NotFound: If the reservation does not exist
        InvalidOperation: If the reservation is no longer pending or confirmed
        InsufficientCapacity: If the extra seats do not fit
    """
    now = now or utcnow()
    reservation = await get_reservation(db, reservation_id, lock=True)
    screening = await get_screening(db, reservation.screening_id, lock=True)
    held = await inventory.count_held_seats(db, screening.id, now)

    _expire_if_overdue(screening, reservation, held, now)
    if reservation.status not in RESIZABLE_STATUSES:
        raise InvalidOperation(
            f"Reservation {reservation.code} is {ReservationStatus(reservation.status).value} "
            "and can no longer be resized"
        )

    room = await _get_room(db, screening.room_id)
    old_quantity = reservation.quantity
    inventory.resize(screening, held, old_quantity, quantity)

    total = seat_total(screening.base_price, room.surcharge, quantity)
    reservation.quantity = quantity
    reservation.subtotal = total
    reservation.total = total
    await db.flush()

    logger.info(f"Reservation {reservation.code}: resized {old_quantity} -> {quantity} seats")
    return reservation


async def update_reservation_details(
    db: AsyncSession,
    reservation_id: int,
    fields: dict,
) -> Reservation:
    """Update the payment method and/or notes of a reservation."""
    reservation = await get_reservation(db, reservation_id, lock=True)
    if "payment_method" in fields:
        if reservation.status == S.PAID:
            raise InvalidOperation(f"Reservation {reservation.code} is already paid")
        reservation.payment_method = fields["payment_method"]
    if "notes" in fields:
        reservation.notes = fields["notes"]
    await db.flush()
    return reservation


async def delete_reservation(
    db: AsyncSession,
    reservation_id: int,
    now: datetime | None = None,
) -> None:
    """
    Remove a reservation, giving back any seats it still holds.

    Raises:
        NotFound: If the reservation does not exist
        InvalidOperation: If the reservation is used or paid
    """
    now = now or utcnow()
    reservation = await get_reservation(db, reservation_id, lock=True)
    screening = await get_screening(db, reservation.screening_id, lock=True)

    if reservation.status == S.USED:
        raise InvalidOperation(f"Reservation {reservation.code} was used and cannot be deleted")
    if reservation.status == S.PAID:
        if screening.starts_at < now:
            raise InvalidOperation(
                f"Reservation {reservation.code} is paid for a screening that already "
                "started; it must be kept for the audit trail"
            )
        raise InvalidOperation(f"Reservation {reservation.code} is paid and cannot be deleted")

    if reservation.holds_seats(now):
        held = await inventory.count_held_seats(db, screening.id, now)
        inventory.release(screening, held, reservation.quantity)

    await db.delete(reservation)
    await db.flush()
    logger.info(f"Deleted reservation {reservation.code}")


async def list_reservations(
    db: AsyncSession,
    screening_id: int | None = None,
    customer_id: int | None = None,
    status: ReservationStatus | None = None,
) -> list[Reservation]:
    """List reservations, newest first, optionally filtered."""
    stmt = select(Reservation).order_by(Reservation.created_at.desc())
    if screening_id is not None:
        stmt = stmt.where(Reservation.screening_id == screening_id)
    if customer_id is not None:
        stmt = stmt.where(Reservation.customer_id == customer_id)
    if status is not None:
        stmt = stmt.where(Reservation.status == status)
    result = await db.execute(stmt)
    return list(result.scalars().all())
