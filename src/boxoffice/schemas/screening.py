"""Pydantic schemas for screening data."""

from datetime import datetime
from decimal import Decimal

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class ScreeningCreate(BaseModel):
    """Request body for scheduling a film. The end time is always derived."""

    film_id: int
    room_id: int
    starts_at: AwareDatetime
    base_price: Decimal = Field(ge=0, decimal_places=2)


class ScreeningUpdate(BaseModel):
    """Partial screening update; only the fields sent are changed."""

    film_id: int | None = None
    room_id: int | None = None
    starts_at: AwareDatetime | None = None
    base_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    active: bool | None = None


class ScreeningResponse(BaseModel):
    """Screening response schema, including its seat ledger."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    film_id: int
    room_id: int
    starts_at: datetime
    ends_at: datetime
    base_price: Decimal
    seats_available: int
    seats_reserved: int
    active: bool


class AvailabilityResponse(BaseModel):
    """Seat availability recomputed from live reservations."""

    screening_id: int
    total_seats: int
    held_seats: int
    available_seats: int
