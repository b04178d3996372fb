"""Reservation model and its status vocabulary."""

import enum
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boxoffice.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from boxoffice.models.customer import Customer
    from boxoffice.models.screening import Screening


class ReservationStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PAID = "paid"
    CANCELLED = "cancelled"
    USED = "used"
    EXPIRED = "expired"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    BANK_TRANSFER = "bank_transfer"
    PAYPAL = "paypal"


# Statuses whose quantity counts against screening capacity
LIVE_STATUSES = frozenset(
    {ReservationStatus.PENDING, ReservationStatus.CONFIRMED, ReservationStatus.PAID}
)

# A redeemed ticket keeps occupying its seat
SEAT_HOLDING_STATUSES = LIVE_STATUSES | {ReservationStatus.USED}

# Reservations that lock their screening against structural edits and deletion
COMMITTED_STATUSES = frozenset(
    {ReservationStatus.CONFIRMED, ReservationStatus.PAID, ReservationStatus.USED}
)


def _enum_column(enum_cls: type[enum.Enum]) -> Enum:
    return Enum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda e: [member.value for member in e],
    )


class Reservation(Base, TimestampMixin):
    """
    Reservation model.

    A customer's hold on a quantity of seats for one screening. Pending
    reservations stop holding seats once expires_at has passed, even before
    the expiry sweep has persisted the expired status.
    """

    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_reservations_quantity_positive"),
        CheckConstraint("total >= 0", name="ck_reservations_total_non_negative"),
        # Serves the expiry sweep over overdue holds
        Index(
            "ix_reservations_pending_expiry",
            "expires_at",
            postgresql_where=text("status = 'pending'"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)

    # Foreign keys
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    screening_id: Mapped[int] = mapped_column(
        ForeignKey("screenings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    status: Mapped[ReservationStatus] = mapped_column(
        _enum_column(ReservationStatus),
        nullable=False,
        default=ReservationStatus.PENDING,
        index=True,
    )
    payment_method: Mapped[PaymentMethod | None] = mapped_column(
        _enum_column(PaymentMethod),
        nullable=True,
    )

    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Staff member who took the payment (opaque id from the auth system)
    confirmed_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Relationships
    customer: Mapped["Customer"] = relationship(back_populates="reservations")
    screening: Mapped["Screening"] = relationship(back_populates="reservations")

    def is_overdue(self, now: datetime) -> bool:
        """Whether this is a pending hold whose payment window has closed."""
        return (
            self.status == ReservationStatus.PENDING
            and self.expires_at is not None
            and self.expires_at <= now
        )

    def holds_seats(self, now: datetime) -> bool:
        """Whether this reservation currently counts against screening capacity."""
        return self.status in SEAT_HOLDING_STATUSES and not self.is_overdue(now)

    def __repr__(self) -> str:
        return (
            f"<Reservation(code={self.code!r}, "
            f"screening_id={self.screening_id!r}, "
            f"quantity={self.quantity}, "
            f"status={self.status})>"
        )
