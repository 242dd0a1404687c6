"""
Canonical lock acquisition for payment paths.

Every path that touches a payment and its rental locks them here, the
payment first and the rental second. The state machine then locks the
car, giving payment -> rental -> car everywhere.
"""

from __future__ import annotations

from typing import Iterable

from apps.payments.models import Payment
from apps.rentals.models import Rental
from apps.rentals.services import lock_queryset_if_possible, lock_rental


def lock_payment_and_rental(
    rental_id: int,
    *,
    statuses: Iterable[str] | None = None,
    using: str,
) -> tuple[Payment | None, Rental]:
    """
    Lock the rental's latest payment (optionally restricted to
    ``statuses``), then the rental itself.

    The payment query runs again once the rental is locked, so a payment
    inserted by a writer that held the rental lock first is still seen.

    Raises:
        RentalNotFound: no such rental
    """
    payments = Payment.objects.using(using).filter(rental_id=rental_id)
    if statuses is not None:
        payments = payments.filter(status__in=list(statuses))
    payments = payments.order_by("-created_at", "-id")

    payment = lock_queryset_if_possible(payments, using).first()
    rental = lock_rental(rental_id, using)

    # Every payment writer holds the rental lock, so this read is serialized
    latest = payments.first()
    if latest is not None and (payment is None or latest.pk != payment.pk):
        payment = latest
    return payment, rental
