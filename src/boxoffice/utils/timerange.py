"""Time range helpers for screening schedules."""

from datetime import datetime, timedelta, timezone

# Minutes a room needs after the credits before the next screening
CLEANUP_BUFFER_MINUTES = 30


def compute_end(
    start: datetime,
    duration_minutes: int,
    buffer_minutes: int = CLEANUP_BUFFER_MINUTES,
) -> datetime:
    """
    Compute when a room becomes free again after a screening.

    Args:
        start: Screening start time
        duration_minutes: Film runtime in minutes
        buffer_minutes: Cleanup time appended after the film

    Returns:
        start + runtime + cleanup buffer

    Example:
        >>> from datetime import datetime
        >>> compute_end(datetime(2026, 3, 1, 18, 0), 120)
        datetime.datetime(2026, 3, 1, 20, 30)
    """
    return start + timedelta(minutes=duration_minutes + buffer_minutes)


def overlaps(
    a_start: datetime,
    a_end: datetime,
    b_start: datetime,
    b_end: datetime,
) -> bool:
    """
    Check whether two half-open ranges [a_start, a_end) and [b_start, b_end) intersect.

    Ranges that merely touch (one ends exactly when the other starts) do not
    overlap, so back-to-back screenings are allowed.

    Args:
        a_start: Start of the first range
        a_end: End of the first range (exclusive)
        b_start: Start of the second range
        b_end: End of the second range (exclusive)

    Returns:
        True if the ranges share at least one instant
    """
    return a_start < b_end and b_start < a_end


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
