"""Pydantic schemas for reservation data."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from boxoffice.models.reservation import PaymentMethod, ReservationStatus


class ReservationCreate(BaseModel):
    """Request body for holding seats."""

    customer_id: int
    screening_id: int
    quantity: int = Field(ge=1)
    payment_method: PaymentMethod | None = None
    notes: str | None = None


class StatusChange(BaseModel):
    """Request body for a status transition."""

    status: ReservationStatus
    actor: str | None = Field(default=None, description="Staff member making the change")


class QuantityChange(BaseModel):
    quantity: int = Field(ge=1)


class ReservationUpdate(BaseModel):
    """Partial update of the non-lifecycle fields."""

    payment_method: PaymentMethod | None = None
    notes: str | None = None


class ReservationResponse(BaseModel):
    """Reservation response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    customer_id: int
    screening_id: int
    quantity: int
    subtotal: Decimal
    total: Decimal
    status: ReservationStatus
    payment_method: PaymentMethod | None = None
    created_at: datetime | None = None
    paid_at: datetime | None = None
    expires_at: datetime | None = None
    notes: str | None = None
    confirmed_by: str | None = None
