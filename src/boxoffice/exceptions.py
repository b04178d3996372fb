"""Domain errors raised by the scheduling and reservation services.

Each error carries the HTTP status code the API layer answers with, so the
services stay independent of FastAPI.
"""


class BoxOfficeError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(BoxOfficeError):
    """A referenced film, room, customer, screening or reservation does not exist."""

    status_code = 404

    def __init__(self, entity: str, identifier: object) -> None:
        super().__init__(f"{entity} {identifier} not found")
        self.entity = entity
        self.identifier = identifier


class Conflict(BoxOfficeError):
    """The request collides with existing state."""

    status_code = 409


class ScheduleConflict(Conflict):
    """A screening would overlap another active screening in the same room."""

    def __init__(self, room_id: int, conflicting_ids: list[int]) -> None:
        ids = ", ".join(str(i) for i in conflicting_ids)
        super().__init__(f"Room {room_id} already has a screening in that slot (screenings: {ids})")
        self.room_id = room_id
        self.conflicting_ids = conflicting_ids


class InsufficientCapacity(Conflict):
    """Seat demand exceeds what the screening has left."""

    def __init__(self, screening_id: int | None, requested: int, available: int) -> None:
        super().__init__(
            f"Screening {screening_id} has {available} seats left, {requested} requested"
        )
        self.screening_id = screening_id
        self.requested = requested
        self.available = available


class InvalidOperation(BoxOfficeError):
    """The edit or delete is not allowed in the entity's current state."""

    status_code = 400


class InvalidTransition(BoxOfficeError):
    """A reservation status change that the lifecycle does not allow."""

    status_code = 400

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move reservation from {current} to {target}")
        self.current = current
        self.target = target
