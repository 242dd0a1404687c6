from datetime import timedelta

import pytest
from django.utils import timezone

from apps.rentals.domain.lifecycle import RentalStatus
from apps.rentals.models import Rental, RentalStatusLog
from apps.rentals.tasks import cancel_stale_pending_rentals

from .factories import make_car, make_customer, make_rental, window


def _age(rental: Rental, minutes: int) -> None:
    Rental.objects.filter(pk=rental.pk).update(created_at=timezone.now() - timedelta(minutes=minutes))


@pytest.mark.django_db
def test_only_expired_pending_rentals_are_cancelled():
    customer = make_customer()
    car = make_car()
    stale = make_rental(customer, car, dates=window(1, 1))
    fresh = make_rental(customer, car, dates=window(3, 1))
    booked = make_rental(customer, car, status=RentalStatus.BOOKED, dates=window(5, 1))
    _age(stale, 45)
    _age(booked, 45)

    result = cancel_stale_pending_rentals()

    assert result == {"cancelled": 1, "skipped": 0}
    assert Rental.objects.get(pk=stale.pk).status == RentalStatus.CANCELLED
    assert Rental.objects.get(pk=fresh.pk).status == RentalStatus.PENDING
    assert Rental.objects.get(pk=booked.pk).status == RentalStatus.BOOKED
    log = RentalStatusLog.objects.get(rental=stale)
    assert log.actor_kind == RentalStatusLog.ActorKind.SYSTEM


@pytest.mark.django_db
def test_nothing_to_do():
    assert cancel_stale_pending_rentals() == {"cancelled": 0, "skipped": 0}


@pytest.mark.django_db(transaction=True)
def test_task_runs_through_celery_eagerly():
    rental = make_rental(make_customer(), make_car())
    _age(rental, 120)

    result = cancel_stale_pending_rentals.delay()

    assert result.get() == {"cancelled": 1, "skipped": 0}
