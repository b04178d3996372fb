"""Screenings API endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.database import get_db, run_with_retries
from boxoffice.models.screening import Screening
from boxoffice.schemas.screening import (
    AvailabilityResponse,
    ScreeningCreate,
    ScreeningResponse,
    ScreeningUpdate,
)
from boxoffice.services import screenings

router = APIRouter()


@router.post("/screenings", response_model=ScreeningResponse, status_code=201)
async def create_screening(
    request: ScreeningCreate,
    db: AsyncSession = Depends(get_db),
) -> Screening:
    """
    Schedule a film into a room.

    The end time is the start plus the film runtime plus the cleanup buffer.
    Answers 409 if the slot overlaps another active screening in the room.
    """
    return await run_with_retries(
        db,
        lambda: screenings.create_screening(
            db,
            film_id=request.film_id,
            room_id=request.room_id,
            starts_at=request.starts_at,
            base_price=request.base_price,
        ),
    )


@router.get("/screenings", response_model=list[ScreeningResponse])
async def list_screenings(
    room_id: int | None = Query(None, description="Only screenings in this room"),
    film_id: int | None = Query(None, description="Only screenings of this film"),
    date_param: date | None = Query(None, alias="date", description="Day (YYYY-MM-DD, UTC)"),
    active: bool | None = Query(None, description="Filter by active flag"),
    db: AsyncSession = Depends(get_db),
) -> list[Screening]:
    return await screenings.list_screenings(
        db, room_id=room_id, film_id=film_id, day=date_param, active=active
    )


@router.get("/screenings/{screening_id}", response_model=ScreeningResponse)
async def get_screening(screening_id: int, db: AsyncSession = Depends(get_db)) -> Screening:
    return await screenings.get_screening(db, screening_id)


@router.get("/screenings/{screening_id}/availability", response_model=AvailabilityResponse)
async def get_availability(
    screening_id: int,
    db: AsyncSession = Depends(get_db),
) -> AvailabilityResponse:
    """Seats left, counted from live reservations rather than the cached counters."""
    availability = await screenings.get_availability(db, screening_id)
    return AvailabilityResponse(**availability)


@router.patch("/screenings/{screening_id}", response_model=ScreeningResponse)
async def update_screening(
    screening_id: int,
    request: ScreeningUpdate,
    db: AsyncSession = Depends(get_db),
) -> Screening:
    """
    Edit a screening.

    With confirmed reservations only ``active`` and ``base_price`` are applied.
    """
    patch = request.model_dump(exclude_unset=True, exclude_none=True)
    return await run_with_retries(db, lambda: screenings.update_screening(db, screening_id, patch))


@router.delete("/screenings/{screening_id}", status_code=204)
async def delete_screening(screening_id: int, db: AsyncSession = Depends(get_db)) -> Response:
    """Delete a screening without confirmed reservations, purging its other reservations."""
    await run_with_retries(db, lambda: screenings.delete_screening(db, screening_id))
    return Response(status_code=204)
