"""Reservations API endpoints."""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.database import get_db, run_with_retries
from boxoffice.models.reservation import Reservation, ReservationStatus
from boxoffice.schemas.reservation import (
    QuantityChange,
    ReservationCreate,
    ReservationResponse,
    ReservationUpdate,
    StatusChange,
)
from boxoffice.services import reservations

router = APIRouter()


@router.post("/reservations", response_model=ReservationResponse, status_code=201)
async def create_reservation(
    request: ReservationCreate,
    db: AsyncSession = Depends(get_db),
) -> Reservation:
    """
    Hold seats for a customer.

    The reservation starts pending and lapses if it is not confirmed within
    the hold window. Answers 409 when the seats do not fit.
    """
    return await run_with_retries(
        db,
        lambda: reservations.create_reservation(
            db,
            customer_id=request.customer_id,
            screening_id=request.screening_id,
            quantity=request.quantity,
            payment_method=request.payment_method,
            notes=request.notes,
        ),
    )


@router.get("/reservations", response_model=list[ReservationResponse])
async def list_reservations(
    screening_id: int | None = Query(None),
    customer_id: int | None = Query(None),
    status: ReservationStatus | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> list[Reservation]:
    return await reservations.list_reservations(
        db, screening_id=screening_id, customer_id=customer_id, status=status
    )


@router.get("/reservations/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(reservation_id: int, db: AsyncSession = Depends(get_db)) -> Reservation:
    return await reservations.get_reservation(db, reservation_id)


@router.post("/reservations/{reservation_id}/status", response_model=ReservationResponse)
async def change_status(
    reservation_id: int,
    request: StatusChange,
    db: AsyncSession = Depends(get_db),
) -> Reservation:
    """Move a reservation through its lifecycle. Answers 400 for disallowed transitions."""
    return await run_with_retries(
        db,
        lambda: reservations.transition_reservation(
            db, reservation_id, request.status, actor=request.actor
        ),
    )


@router.post("/reservations/{reservation_id}/quantity", response_model=ReservationResponse)
async def change_quantity(
    reservation_id: int,
    request: QuantityChange,
    db: AsyncSession = Depends(get_db),
) -> Reservation:
    """Resize a pending or confirmed reservation and reprice it."""
    return await run_with_retries(
        db, lambda: reservations.resize_reservation(db, reservation_id, request.quantity)
    )


@router.patch("/reservations/{reservation_id}", response_model=ReservationResponse)
async def update_reservation(
    reservation_id: int,
    request: ReservationUpdate,
    db: AsyncSession = Depends(get_db),
) -> Reservation:
    fields = request.model_dump(exclude_unset=True)
    return await run_with_retries(
        db, lambda: reservations.update_reservation_details(db, reservation_id, fields)
    )


@router.delete("/reservations/{reservation_id}", status_code=204)
async def delete_reservation(reservation_id: int, db: AsyncSession = Depends(get_db)) -> Response:
    """Delete a reservation. Paid and used reservations are kept for the audit trail."""
    await run_with_retries(db, lambda: reservations.delete_reservation(db, reservation_id))
    return Response(status_code=204)
