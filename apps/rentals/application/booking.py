"""
Booking Orchestrator

Creates Pending rentals. The overlap check runs under the car row lock,
which is what keeps two concurrent bookings from taking the same window.
"""

from __future__ import annotations

from datetime import datetime
import logging

from apps.rentals.domain.events import RentalInitiated
from apps.rentals.domain.lifecycle import RentalStatus
from apps.rentals.domain.pricing import CostQuote, quote_cost
from apps.rentals.models import Rental
from apps.rentals.services import blocking_statuses, has_overlap, lock_car
from shared.application.context import RentalContext
from shared.domain.errors import CarNotAvailable, InvalidDates, RentalNotFound

logger = logging.getLogger(__name__)


def initiate_booking(
    ctx: RentalContext,
    customer_id: int,
    car_id: int,
    pickup: datetime,
    dropoff: datetime,
    pickup_location: str | None = None,
) -> Rental:
    """
    Book a car for a customer.

    Returns the new rental in status Pending. Car availability is left
    untouched until the rental reaches an occupying status.

    Raises:
        InvalidDates: bad ids, pickup not before dropoff, or pickup
            further in the past than the grace window
        CarNotFound: no such car
        CarNotAvailable: an overlapping rental holds the car
    """
    if customer_id is None or car_id is None or customer_id <= 0 or car_id <= 0:
        raise InvalidDates("Customer and car must be specified")
    if pickup >= dropoff:
        raise InvalidDates("Dropoff date must be after pickup date")
    if pickup < ctx.now() - ctx.pickup_grace:
        raise InvalidDates("Pickup date cannot be in the past")

    logger.info(f"Booking car {car_id} for customer {customer_id}: {pickup.isoformat()} - {dropoff.isoformat()}")

    with ctx.begin() as uow:
        car = lock_car(car_id, ctx.using)

        if has_overlap(
            car.pk,
            pickup,
            dropoff,
            statuses=blocking_statuses(ctx.pending_holds_slot),
            using=ctx.using,
        ):
            logger.warning(f"Car {car.pk} already booked for {pickup.isoformat()} - {dropoff.isoformat()}")
            raise CarNotAvailable()

        if not pickup_location:
            pickup_location = car.branch.address or None

        rental = Rental(
            customer_id=customer_id,
            car=car,
            pickup_date=pickup,
            dropoff_date=dropoff,
            pickup_location=pickup_location,
            status=RentalStatus.PENDING,
        )
        rental.save(using=ctx.using, force_insert=True)

        uow.record(RentalInitiated(
            aggregate_id=rental.pk,
            rental_id=rental.pk,
            customer_id=customer_id,
            car_id=car.pk,
            pickup_date=pickup,
            dropoff_date=dropoff,
        ))

    logger.info(f"Rental {rental.pk} created in status {rental.status}")
    return rental


def quote_rental_cost(ctx: RentalContext, rental_id: int) -> CostQuote:
    """Price breakdown for an existing rental at the car's current rate."""

    try:
        rental = Rental.objects.using(ctx.using).select_related("car").get(pk=rental_id)
    except Rental.DoesNotExist:
        raise RentalNotFound()

    return quote_cost(
        rental.pickup_date,
        rental.dropoff_date,
        rental.car.price_per_day,
        ctx.tax_rate,
        ctx.currency,
    )
