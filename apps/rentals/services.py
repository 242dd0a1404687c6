"""Row locks and availability queries for rentals."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, TYPE_CHECKING

from django.db import DEFAULT_DB_ALIAS, transaction  # type: ignore
from django.db.models import Exists, OuterRef, Q  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore

from apps.fleet.models import Car
from shared.domain.errors import CarNotFound, InvalidDates, RentalNotFound

from .domain.lifecycle import OCCUPYING, RentalStatus
from .models import Rental

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from shared.application.context import RentalContext


def lock_queryset_if_possible(queryset, using: str = DEFAULT_DB_ALIAS):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection(using).in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def lock_car(car_id: int, using: str = DEFAULT_DB_ALIAS) -> Car:
    """SELECT ... FOR UPDATE the car row."""

    try:
        return lock_queryset_if_possible(Car.objects.using(using).filter(pk=car_id), using).get()
    except Car.DoesNotExist:
        raise CarNotFound()


def lock_rental(rental_id: int, using: str = DEFAULT_DB_ALIAS) -> Rental:
    """SELECT ... FOR UPDATE the rental row."""

    try:
        return lock_queryset_if_possible(Rental.objects.using(using).filter(pk=rental_id), using).get()
    except Rental.DoesNotExist:
        raise RentalNotFound()


def blocking_statuses(pending_holds_slot: bool) -> frozenset[str]:
    """Statuses that keep other bookings out of a window."""

    if pending_holds_slot:
        return OCCUPYING | {RentalStatus.PENDING}
    return OCCUPYING


def _overlap_filter(pickup: datetime, dropoff: datetime, prefix: str = "") -> Q:
    # Half-open windows: p1 < d2 AND p2 < d1
    return Q(**{f"{prefix}pickup_date__lt": dropoff}) & Q(**{f"{prefix}dropoff_date__gt": pickup})


def has_overlap(
    car_id: int,
    pickup: datetime,
    dropoff: datetime,
    exclude_rental_id: int | None = None,
    *,
    statuses: Iterable[str] = OCCUPYING,
    using: str = DEFAULT_DB_ALIAS,
) -> bool:
    """
    Does any rental of the car in ``statuses`` overlap the window?

    When used for booking, call it while holding the car row lock so the
    answer cannot change before the insert.
    """

    rentals_qs = Rental.objects.using(using).filter(
        car_id=car_id,
        status__in=list(statuses),
    ).filter(_overlap_filter(pickup, dropoff))

    if exclude_rental_id is not None:
        rentals_qs = rentals_qs.exclude(pk=exclude_rental_id)

    return rentals_qs.exists()


def has_future_occupancy(car_id: int, now: datetime, exclude_rental_id: int, using: str = DEFAULT_DB_ALIAS) -> bool:
    """Another occupying rental on the car that has not ended yet."""

    return (
        Rental.objects.using(using)
        .filter(car_id=car_id, status__in=list(OCCUPYING), dropoff_date__gt=now)
        .exclude(pk=exclude_rental_id)
        .exists()
    )


def available_cars(
    ctx: "RentalContext",
    pickup: datetime | None = None,
    dropoff: datetime | None = None,
    branch_id: int | None = None,
):
    """
    Cars that can be booked.

    With a window, a car is available when no blocking rental overlaps
    it. Without one, the cached availability flag is used.
    """

    cars = Car.objects.using(ctx.using).select_related("branch")
    if branch_id is not None:
        cars = cars.filter(branch_id=branch_id)

    if pickup is None and dropoff is None:
        return cars.filter(availability=True)

    if pickup is None or dropoff is None or pickup >= dropoff:
        raise InvalidDates("Both pickup and dropoff are required and dropoff must be after pickup")

    blocking = Rental.objects.using(ctx.using).filter(
        car=OuterRef("pk"),
        status__in=list(blocking_statuses(ctx.pending_holds_slot)),
    ).filter(_overlap_filter(pickup, dropoff))

    return cars.filter(~Exists(blocking))
