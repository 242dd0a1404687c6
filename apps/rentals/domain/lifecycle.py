"""
Rental lifecycle

The allowed status transitions, and which statuses occupy a car.
"""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.errors import InvalidTransition


class RentalStatus(models.TextChoices):
    PENDING = "Pending", _("Pending")
    BOOKED = "Booked", _("Booked")
    PENDING_VERIFICATION = "Pending Verification", _("Pending Verification")
    CONFIRMED = "Confirmed", _("Confirmed")
    ACTIVE = "Active", _("Active")
    RETURNED = "Returned", _("Returned")
    CANCELLED = "Cancelled", _("Cancelled")
    FAILED = "Failed", _("Failed")


TRANSITIONS: dict[str, frozenset[str]] = {
    RentalStatus.PENDING: frozenset({
        RentalStatus.BOOKED,
        RentalStatus.CANCELLED,
        RentalStatus.PENDING_VERIFICATION,
    }),
    RentalStatus.BOOKED: frozenset({
        RentalStatus.CONFIRMED,
        RentalStatus.CANCELLED,
        RentalStatus.FAILED,
        RentalStatus.PENDING_VERIFICATION,
    }),
    RentalStatus.PENDING_VERIFICATION: frozenset({
        RentalStatus.CONFIRMED,
        RentalStatus.FAILED,
        RentalStatus.CANCELLED,
    }),
    RentalStatus.CONFIRMED: frozenset({RentalStatus.ACTIVE, RentalStatus.CANCELLED}),
    RentalStatus.ACTIVE: frozenset({RentalStatus.RETURNED, RentalStatus.CANCELLED}),
    RentalStatus.RETURNED: frozenset(),
    RentalStatus.CANCELLED: frozenset(),
    RentalStatus.FAILED: frozenset(),
}

# Statuses that hold the car for the rental window
OCCUPYING: frozenset[str] = frozenset({
    RentalStatus.BOOKED,
    RentalStatus.CONFIRMED,
    RentalStatus.ACTIVE,
    RentalStatus.PENDING_VERIFICATION,
})

TERMINAL: frozenset[str] = frozenset({
    RentalStatus.RETURNED,
    RentalStatus.CANCELLED,
    RentalStatus.FAILED,
})

# Statuses a customer may still cancel from
CUSTOMER_CANCELLABLE: frozenset[str] = frozenset({
    RentalStatus.PENDING,
    RentalStatus.BOOKED,
    RentalStatus.PENDING_VERIFICATION,
    RentalStatus.CONFIRMED,
})


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def ensure_transition(current: str, target: str) -> None:
    """Raise InvalidTransition unless ``current -> target`` is in the table."""

    if target not in RentalStatus.values:
        raise InvalidTransition(f"Unknown rental status: {target!r}")
    if not can_transition(current, target):
        raise InvalidTransition(f"Invalid status transition from {current} to {target}")
