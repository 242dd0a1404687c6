import pytest

from apps.rentals.domain.lifecycle import (
    OCCUPYING,
    TERMINAL,
    TRANSITIONS,
    RentalStatus,
    can_transition,
    ensure_transition,
)
from apps.rentals.models import Rental
from shared.domain.errors import InvalidTransition


def test_every_status_has_a_row():
    assert set(TRANSITIONS) == set(RentalStatus)


def test_terminal_statuses_have_no_way_out():
    for status in TERMINAL:
        assert TRANSITIONS[status] == frozenset()


def test_statuses_are_stored_as_labels():
    assert RentalStatus.PENDING_VERIFICATION == "Pending Verification"
    assert RentalStatus("Booked") is RentalStatus.BOOKED


@pytest.mark.parametrize(
    "current, target",
    [
        (RentalStatus.PENDING, RentalStatus.BOOKED),
        (RentalStatus.PENDING, RentalStatus.PENDING_VERIFICATION),
        (RentalStatus.BOOKED, RentalStatus.FAILED),
        (RentalStatus.PENDING_VERIFICATION, RentalStatus.CONFIRMED),
        (RentalStatus.CONFIRMED, RentalStatus.ACTIVE),
        (RentalStatus.ACTIVE, RentalStatus.RETURNED),
    ],
)
def test_allowed_transitions(current, target):
    assert can_transition(current, target)
    ensure_transition(current, target)


@pytest.mark.parametrize(
    "current, target",
    [
        (RentalStatus.PENDING, RentalStatus.ACTIVE),
        (RentalStatus.PENDING, RentalStatus.CONFIRMED),
        (RentalStatus.CONFIRMED, RentalStatus.RETURNED),
        (RentalStatus.RETURNED, RentalStatus.ACTIVE),
        (RentalStatus.CANCELLED, RentalStatus.CANCELLED),
        (RentalStatus.FAILED, RentalStatus.BOOKED),
    ],
)
def test_disallowed_transitions(current, target):
    assert not can_transition(current, target)
    with pytest.raises(InvalidTransition):
        ensure_transition(current, target)


def test_unknown_target_is_an_invalid_transition():
    with pytest.raises(InvalidTransition):
        ensure_transition(RentalStatus.PENDING, "Teleported")


def test_pending_does_not_occupy():
    assert RentalStatus.PENDING not in OCCUPYING
    assert OCCUPYING.isdisjoint(TERMINAL)


@pytest.mark.parametrize("status", list(RentalStatus))
def test_rental_reports_whether_it_occupies_the_car(status):
    assert Rental(status=status).is_occupying == (status in OCCUPYING)
