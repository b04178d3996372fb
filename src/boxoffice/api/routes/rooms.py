"""Rooms API endpoints."""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.database import get_db, run_with_retries
from boxoffice.models.room import Room
from boxoffice.schemas.room import RoomCreate, RoomResponse, RoomUpdate
from boxoffice.services import rooms

router = APIRouter()


@router.post("/rooms", response_model=RoomResponse, status_code=201)
async def create_room(request: RoomCreate, db: AsyncSession = Depends(get_db)) -> Room:
    """Add a room. Capacity must equal rows × seats per row."""
    return await run_with_retries(db, lambda: rooms.create_room(db, request.model_dump()))


@router.get("/rooms", response_model=list[RoomResponse])
async def list_rooms(
    active: bool | None = Query(None, description="Filter by active flag"),
    db: AsyncSession = Depends(get_db),
) -> list[Room]:
    return await rooms.list_rooms(db, active=active)


@router.get("/rooms/{room_id}", response_model=RoomResponse)
async def get_room(room_id: int, db: AsyncSession = Depends(get_db)) -> Room:
    return await rooms.get_room(db, room_id)


@router.patch("/rooms/{room_id}", response_model=RoomResponse)
async def update_room(
    room_id: int,
    request: RoomUpdate,
    db: AsyncSession = Depends(get_db),
) -> Room:
    """
    Edit a room.

    While the room has active upcoming screenings only active, surcharge,
    equipment and notes are applied.
    """
    patch = request.model_dump(exclude_unset=True, exclude_none=True)
    return await run_with_retries(db, lambda: rooms.update_room(db, room_id, patch))


@router.delete("/rooms/{room_id}", status_code=204)
async def delete_room(room_id: int, db: AsyncSession = Depends(get_db)) -> Response:
    """Delete a room that never hosted a screening."""
    await run_with_retries(db, lambda: rooms.delete_room(db, room_id))
    return Response(status_code=204)
