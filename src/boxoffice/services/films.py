"""Film catalogue operations."""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.exceptions import InvalidOperation, NotFound
from boxoffice.models.film import Film
from boxoffice.models.screening import Screening

logger = logging.getLogger(__name__)

FILM_FIELDS = frozenset({"title", "duration_minutes", "rating", "synopsis", "active"})


@dataclass(frozen=True)
class Deleted:
    """The film was removed."""


@dataclass(frozen=True)
class Deactivated:
    """The film was kept, but switched off, because something still references it."""

    reason: str


DeleteOutcome = Deleted | Deactivated


async def get_film(db: AsyncSession, film_id: int) -> Film:
    """Load a film or raise NotFound."""
    film = await db.get(Film, film_id)
    if film is None:
        raise NotFound("Film", film_id)
    return film


async def count_screenings(db: AsyncSession, film_id: int) -> int:
    result = await db.execute(select(func.count(Screening.id)).where(Screening.film_id == film_id))
    return int(result.scalar_one())


async def create_film(db: AsyncSession, fields: dict[str, Any]) -> Film:
    """Add a film to the catalogue."""
    if fields["duration_minutes"] < 1:
        raise InvalidOperation("Film duration must be at least one minute")
    film = Film(
        title=fields["title"],
        duration_minutes=fields["duration_minutes"],
        rating=fields.get("rating"),
        synopsis=fields.get("synopsis"),
        active=fields.get("active", True),
    )
    db.add(film)
    await db.flush()
    logger.info(f"Created film {film.title!r} ({film.duration_minutes} min)")
    return film


async def update_film(db: AsyncSession, film_id: int, patch: dict[str, Any]) -> Film:
    """
    Apply a partial update to a film.

    The runtime is frozen once the film has been scheduled, since every
    screening's end time was derived from it.
    """
    film = await get_film(db, film_id)

    unknown = set(patch) - FILM_FIELDS
    if unknown:
        raise InvalidOperation(f"Unknown film fields: {sorted(unknown)}")

    if "duration_minutes" in patch and patch["duration_minutes"] != film.duration_minutes:
        if patch["duration_minutes"] < 1:
            raise InvalidOperation("Film duration must be at least one minute")
        scheduled = await count_screenings(db, film_id)
        if scheduled:
            raise InvalidOperation(
                f"Film {film_id} has {scheduled} screenings; its duration can no longer change"
            )

    for field, value in patch.items():
        setattr(film, field, value)
    await db.flush()
    logger.info(f"Updated film {film_id}: {sorted(patch)}")
    return film


async def delete_film(db: AsyncSession, film_id: int) -> DeleteOutcome:
    """
    Delete a film, or deactivate it when screenings still reference it.

    Returns:
        Deleted, or Deactivated with the reason the film was kept
    """
    film = await get_film(db, film_id)
    scheduled = await count_screenings(db, film_id)

    if scheduled:
        film.active = False
        await db.flush()
        reason = f"film has {scheduled} screenings"
        logger.info(f"Deactivated film {film_id} instead of deleting: {reason}")
        return Deactivated(reason=reason)

    await db.delete(film)
    await db.flush()
    logger.info(f"Deleted film {film_id}")
    return Deleted()
