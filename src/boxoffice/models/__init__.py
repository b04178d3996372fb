"""SQLAlchemy ORM models."""

from boxoffice.models.base import Base
from boxoffice.models.customer import Customer
from boxoffice.models.film import Film
from boxoffice.models.reservation import (
    COMMITTED_STATUSES,
    LIVE_STATUSES,
    SEAT_HOLDING_STATUSES,
    PaymentMethod,
    Reservation,
    ReservationStatus,
)
from boxoffice.models.room import Room, RoomType
from boxoffice.models.screening import Screening

__all__ = [
    "Base",
    "COMMITTED_STATUSES",
    "Customer",
    "Film",
    "LIVE_STATUSES",
    "PaymentMethod",
    "Reservation",
    "ReservationStatus",
    "Room",
    "RoomType",
    "SEAT_HOLDING_STATUSES",
    "Screening",
]
