"""Pydantic schemas for room data."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from boxoffice.models.room import RoomType


class RoomCreate(BaseModel):
    """Request body for adding a room. Capacity defaults to rows × seats per row."""

    number: int = Field(ge=1)
    name: str = Field(min_length=1, max_length=100)
    room_type: RoomType = RoomType.STANDARD
    rows: int = Field(ge=1)
    seats_per_row: int = Field(ge=1)
    capacity: int | None = Field(default=None, ge=1)
    surcharge: Decimal = Field(default=Decimal("0.00"), ge=0, decimal_places=2)
    equipment: dict[str, bool] | None = None
    notes: str | None = None


class RoomUpdate(BaseModel):
    """Partial room update; only the fields sent are changed."""

    number: int | None = Field(default=None, ge=1)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    room_type: RoomType | None = None
    rows: int | None = Field(default=None, ge=1)
    seats_per_row: int | None = Field(default=None, ge=1)
    capacity: int | None = Field(default=None, ge=1)
    surcharge: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    active: bool | None = None
    equipment: dict[str, bool] | None = None
    notes: str | None = None


class RoomResponse(BaseModel):
    """Room response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    number: int
    name: str
    room_type: RoomType
    capacity: int
    rows: int
    seats_per_row: int
    surcharge: Decimal
    active: bool
    equipment: dict[str, bool] | None = None
    notes: str | None = None
