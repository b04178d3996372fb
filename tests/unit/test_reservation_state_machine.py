"""Tests for the reservation status lifecycle rules."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from boxoffice.exceptions import InvalidTransition
from boxoffice.models.reservation import (
    COMMITTED_STATUSES,
    LIVE_STATUSES,
    SEAT_HOLDING_STATUSES,
    Reservation,
    ReservationStatus,
)
from boxoffice.services.reservations import ALLOWED_TRANSITIONS, check_transition

S = ReservationStatus
NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

TERMINAL = [S.PAID, S.CANCELLED, S.USED, S.EXPIRED]


def make_reservation(status: ReservationStatus, expires_at: datetime | None = None) -> Reservation:
    return Reservation(
        id=1,
        code="RESABCDEFGHIJ",
        customer_id=1,
        screening_id=1,
        quantity=2,
        subtotal=Decimal("20.00"),
        total=Decimal("20.00"),
        status=status,
        expires_at=expires_at,
    )


@pytest.mark.parametrize(
    "current,target",
    [
        (S.PENDING, S.CONFIRMED),
        (S.PENDING, S.CANCELLED),
        (S.PENDING, S.EXPIRED),
        (S.PENDING, S.USED),
        (S.CONFIRMED, S.PAID),
        (S.CONFIRMED, S.CANCELLED),
        (S.CONFIRMED, S.USED),
    ],
)
def test_allowed_transitions(current, target):
    check_transition(current, target)


@pytest.mark.parametrize("current", TERMINAL)
@pytest.mark.parametrize("target", list(ReservationStatus))
def test_terminal_statuses_never_move(current, target):
    with pytest.raises(InvalidTransition):
        check_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        (S.CONFIRMED, S.PENDING),
        (S.CONFIRMED, S.EXPIRED),
        (S.PENDING, S.PAID),
        (S.PENDING, S.PENDING),
    ],
)
def test_disallowed_transitions(current, target):
    with pytest.raises(InvalidTransition) as exc_info:
        check_transition(current, target)
    assert exc_info.value.current == current.value
    assert exc_info.value.target == target.value


def test_check_transition_accepts_raw_values():
    check_transition("pending", S.CONFIRMED)


def test_no_transition_leads_back_to_pending():
    for targets in ALLOWED_TRANSITIONS.values():
        assert S.PENDING not in targets


def test_every_status_has_a_rule():
    assert set(ALLOWED_TRANSITIONS) == set(ReservationStatus)


def test_status_groups():
    assert LIVE_STATUSES == {S.PENDING, S.CONFIRMED, S.PAID}
    assert COMMITTED_STATUSES == {S.CONFIRMED, S.PAID, S.USED}


class TestHoldsSeats:
    def test_pending_within_window(self):
        r = make_reservation(S.PENDING, expires_at=NOW + timedelta(minutes=5))
        assert r.holds_seats(NOW)
        assert not r.is_overdue(NOW)

    def test_pending_past_window(self):
        r = make_reservation(S.PENDING, expires_at=NOW - timedelta(seconds=1))
        assert r.is_overdue(NOW)
        assert not r.holds_seats(NOW)

    def test_expiry_instant_counts_as_overdue(self):
        r = make_reservation(S.PENDING, expires_at=NOW)
        assert r.is_overdue(NOW)

    def test_confirmed_never_overdue(self):
        r = make_reservation(S.CONFIRMED, expires_at=NOW - timedelta(hours=1))
        assert not r.is_overdue(NOW)
        assert r.holds_seats(NOW)

    def test_used_keeps_its_seats(self):
        assert make_reservation(S.USED).holds_seats(NOW)

    @pytest.mark.parametrize("status", [S.CANCELLED, S.EXPIRED])
    def test_released_statuses(self, status):
        assert not make_reservation(status).holds_seats(NOW)


def test_seat_holding_is_live_plus_redeemed():
    assert SEAT_HOLDING_STATUSES == LIVE_STATUSES | {S.USED}
    assert S.CANCELLED not in SEAT_HOLDING_STATUSES
    assert S.EXPIRED not in SEAT_HOLDING_STATUSES


def test_pending_expiry_index_is_declared_on_the_model():
    indexes = {i.name: i for i in Reservation.__table__.indexes}
    index = indexes["ix_reservations_pending_expiry"]
    assert [c.name for c in index.columns] == ["expires_at"]
    assert str(index.dialect_options["postgresql"]["where"]) == "status = 'pending'"
