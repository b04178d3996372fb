"""Pydantic schemas for API requests and responses."""

from boxoffice.schemas.customer import CustomerCreate, CustomerResponse
from boxoffice.schemas.film import FilmCreate, FilmDeleteResponse, FilmResponse, FilmUpdate
from boxoffice.schemas.reservation import (
    QuantityChange,
    ReservationCreate,
    ReservationResponse,
    ReservationUpdate,
    StatusChange,
)
from boxoffice.schemas.room import RoomCreate, RoomResponse, RoomUpdate
from boxoffice.schemas.screening import (
    AvailabilityResponse,
    ScreeningCreate,
    ScreeningResponse,
    ScreeningUpdate,
)

__all__ = [
    "AvailabilityResponse",
    "CustomerCreate",
    "CustomerResponse",
    "FilmCreate",
    "FilmDeleteResponse",
    "FilmResponse",
    "FilmUpdate",
    "QuantityChange",
    "ReservationCreate",
    "ReservationResponse",
    "ReservationUpdate",
    "RoomCreate",
    "RoomResponse",
    "RoomUpdate",
    "ScreeningCreate",
    "ScreeningResponse",
    "ScreeningUpdate",
    "StatusChange",
]
