"""Room model for cinema auditoriums."""

import enum
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Enum, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boxoffice.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from boxoffice.models.screening import Screening


class RoomType(str, enum.Enum):
    STANDARD = "standard"
    PREMIUM = "premium"
    VIP = "vip"
    IMAX = "imax"
    FOUR_DX = "4dx"


class Room(Base, TimestampMixin):
    """
    Auditorium model.

    Capacity is fixed by the seating layout: rows × seats per row.
    """

    __tablename__ = "rooms"
    __table_args__ = (
        CheckConstraint("capacity = rows * seats_per_row", name="ck_rooms_capacity_layout"),
        CheckConstraint("capacity > 0", name="ck_rooms_capacity_positive"),
        CheckConstraint("surcharge >= 0", name="ck_rooms_surcharge_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    number: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    room_type: Mapped[RoomType] = mapped_column(
        Enum(
            RoomType,
            native_enum=False,
            length=20,
            values_callable=lambda e: [member.value for member in e],
        ),
        nullable=False,
        default=RoomType.STANDARD,
    )

    # Seating layout
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    rows: Mapped[int] = mapped_column(Integer, nullable=False)
    seats_per_row: Mapped[int] = mapped_column(Integer, nullable=False)

    # Added on top of a screening's base price, per seat
    surcharge: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=Decimal("0.00"))

    active: Mapped[bool] = mapped_column(default=True, nullable=False)
    equipment: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    screenings: Mapped[list["Screening"]] = relationship(back_populates="room")

    def __repr__(self) -> str:
        return f"<Room(id={self.id!r}, number={self.number!r}, capacity={self.capacity})>"
