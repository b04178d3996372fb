"""Customer model."""

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boxoffice.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from boxoffice.models.reservation import Reservation


class Customer(Base, TimestampMixin):
    """A customer who can hold reservations. Only active customers may book."""

    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    active: Mapped[bool] = mapped_column(default=True, nullable=False)

    # Relationships
    reservations: Mapped[list["Reservation"]] = relationship(back_populates="customer")

    def __repr__(self) -> str:
        return f"<Customer(id={self.id!r}, email={self.email!r})>"
