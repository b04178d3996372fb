"""Film model for the cinema catalogue."""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boxoffice.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from boxoffice.models.screening import Screening


class Film(Base, TimestampMixin):
    """
    Film model.

    Only the runtime matters to scheduling: a screening's end time is derived
    from it.
    """

    __tablename__ = "films"
    __table_args__ = (CheckConstraint("duration_minutes > 0", name="ck_films_duration_positive"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    rating: Mapped[str | None] = mapped_column(String(20), nullable=True)
    synopsis: Mapped[str | None] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(default=True, nullable=False)

    # Relationships
    screenings: Mapped[list["Screening"]] = relationship(back_populates="film")

    def __repr__(self) -> str:
        return f"<Film(id={self.id!r}, title={self.title!r}, duration={self.duration_minutes})>"
