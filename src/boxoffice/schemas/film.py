"""Pydantic schemas for film data."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class FilmBase(BaseModel):
    """Base film schema with common fields."""

    title: str = Field(min_length=1, max_length=500)
    duration_minutes: int = Field(ge=1, description="Runtime in minutes")
    rating: str | None = None
    synopsis: str | None = None


class FilmCreate(FilmBase):
    """Request body for adding a film."""

    active: bool = True


class FilmUpdate(BaseModel):
    """Partial film update; only the fields sent are changed."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    duration_minutes: int | None = Field(default=None, ge=1)
    rating: str | None = None
    synopsis: str | None = None
    active: bool | None = None


class FilmResponse(FilmBase):
    """Film response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    active: bool


class FilmDeleteResponse(BaseModel):
    """Outcome of a film delete request."""

    outcome: Literal["deleted", "deactivated"]
    reason: str | None = None
