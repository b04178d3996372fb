"""Screening model: one film shown in one room at one time."""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boxoffice.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from boxoffice.models.film import Film
    from boxoffice.models.reservation import Reservation
    from boxoffice.models.room import Room


class Screening(Base, TimestampMixin):
    """
    Screening model.

    ends_at is always derived from the film runtime plus the cleanup buffer.
    seats_available and seats_reserved form the screening's seat ledger; they
    are rewritten from the live reservation aggregate on every seat change, so
    treat them as a cache rather than the source of truth.
    """

    __tablename__ = "screenings"
    __table_args__ = (
        CheckConstraint("ends_at > starts_at", name="ck_screenings_time_order"),
        CheckConstraint("seats_available >= 0", name="ck_screenings_available_non_negative"),
        CheckConstraint("seats_reserved >= 0", name="ck_screenings_reserved_non_negative"),
        CheckConstraint("base_price >= 0", name="ck_screenings_price_non_negative"),
        Index("ix_screenings_room_window", "room_id", "starts_at", "ends_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Foreign keys
    film_id: Mapped[int] = mapped_column(
        ForeignKey("films.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    room_id: Mapped[int] = mapped_column(
        ForeignKey("rooms.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Schedule
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    ends_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    base_price: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)

    # Seat ledger
    seats_available: Mapped[int] = mapped_column(Integer, nullable=False)
    seats_reserved: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    active: Mapped[bool] = mapped_column(default=True, nullable=False)

    # Relationships
    film: Mapped["Film"] = relationship(back_populates="screenings")
    room: Mapped["Room"] = relationship(back_populates="screenings")
    reservations: Mapped[list["Reservation"]] = relationship(back_populates="screening")

    @property
    def total_seats(self) -> int:
        """Seats the screening was opened with (room capacity at scheduling time)."""
        return self.seats_available + self.seats_reserved

    def __repr__(self) -> str:
        return (
            f"<Screening(id={self.id!r}, "
            f"room_id={self.room_id!r}, "
            f"starts_at={self.starts_at}, "
            f"ends_at={self.ends_at})>"
        )
