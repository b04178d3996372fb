"""Films API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.database import get_db, run_with_retries
from boxoffice.models.film import Film
from boxoffice.schemas.film import FilmCreate, FilmDeleteResponse, FilmResponse, FilmUpdate
from boxoffice.services import films
from boxoffice.services.films import Deactivated

router = APIRouter()


@router.post("/films", response_model=FilmResponse, status_code=201)
async def create_film(
    request: FilmCreate,
    db: AsyncSession = Depends(get_db),
) -> Film:
    """Add a film to the catalogue."""
    return await run_with_retries(db, lambda: films.create_film(db, request.model_dump()))


@router.get("/films/{film_id}", response_model=FilmResponse)
async def get_film(film_id: int, db: AsyncSession = Depends(get_db)) -> Film:
    return await films.get_film(db, film_id)


@router.patch("/films/{film_id}", response_model=FilmResponse)
async def update_film(
    film_id: int,
    request: FilmUpdate,
    db: AsyncSession = Depends(get_db),
) -> Film:
    """Edit a film. The runtime is frozen once the film has screenings."""
    patch = request.model_dump(exclude_unset=True, exclude_none=True)
    return await run_with_retries(db, lambda: films.update_film(db, film_id, patch))


@router.delete("/films/{film_id}", response_model=FilmDeleteResponse)
async def delete_film(film_id: int, db: AsyncSession = Depends(get_db)) -> FilmDeleteResponse:
    """
    Delete a film.

    Films that have been scheduled are deactivated instead, and the response
    says so.
    """
    outcome = await run_with_retries(db, lambda: films.delete_film(db, film_id))
    if isinstance(outcome, Deactivated):
        return FilmDeleteResponse(outcome="deactivated", reason=outcome.reason)
    return FilmDeleteResponse(outcome="deleted")
