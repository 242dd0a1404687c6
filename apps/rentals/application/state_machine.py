"""
Rental State Machine

Moves a rental along its lifecycle inside one transaction: the status
change, the car availability recompute and the audit row commit
together or not at all.

Two entry points:
- transition(): opens and owns its unit of work
- apply_transition(): joins a unit of work owned by the caller

Lock order is rental, then car.
"""

from __future__ import annotations

import logging

from apps.rentals.domain.events import RentalStatusChanged
from apps.rentals.domain.lifecycle import (
    CUSTOMER_CANCELLABLE,
    OCCUPYING,
    TERMINAL,
    RentalStatus,
    ensure_transition,
)
from apps.rentals.models import Rental, RentalStatusLog
from apps.rentals.services import has_future_occupancy, has_overlap, lock_car, lock_rental
from shared.application.context import RentalContext
from shared.application.uow import DjangoUnitOfWork
from shared.domain.errors import CarNotAvailable, Forbidden, InvalidState
from shared.domain.principal import Principal

logger = logging.getLogger(__name__)


def apply_transition(
    uow: DjangoUnitOfWork,
    ctx: RentalContext,
    rental_id: int,
    target: str,
    actor: Principal | None = None,
) -> Rental:
    """
    Transition a rental inside the caller's unit of work.

    Never commits or rolls back. Refuses to run without an active unit
    of work.

    Raises:
        RentalNotFound: no such rental
        InvalidTransition: the lifecycle table forbids current -> target
        CarNotAvailable: entering an occupying status would double-book the car
    """
    uow.ensure_active()

    rental = lock_rental(rental_id, ctx.using)
    car = lock_car(rental.car_id, ctx.using)

    current = rental.status
    ensure_transition(current, target)
    target = RentalStatus(target)
    now = ctx.now()

    if target in OCCUPYING and not rental.is_occupying:
        if has_overlap(
            rental.car_id,
            rental.pickup_date,
            rental.dropoff_date,
            exclude_rental_id=rental.pk,
            statuses=OCCUPYING,
            using=ctx.using,
        ):
            raise CarNotAvailable()

    rental.status = target
    update_fields = ["status", "updated_at"]
    if target == RentalStatus.CONFIRMED:
        rental.booking_date = now
        update_fields.append("booking_date")
    rental.save(using=ctx.using, update_fields=update_fields)

    if target in OCCUPYING:
        available = False
    elif target in TERMINAL:
        available = not has_future_occupancy(car.pk, now, exclude_rental_id=rental.pk, using=ctx.using)
    else:
        available = car.availability

    if car.availability != available:
        car.availability = available
        car.save(using=ctx.using, update_fields=["availability", "updated_at"])

    actor_kind = actor.kind.value if actor is not None else RentalStatusLog.ActorKind.SYSTEM
    actor_id = actor.id if actor is not None else None
    RentalStatusLog.objects.using(ctx.using).create(
        rental=rental,
        from_status=current,
        to_status=target,
        actor_kind=actor_kind,
        actor_id=actor_id,
    )

    uow.record(RentalStatusChanged(
        aggregate_id=rental.pk,
        rental_id=rental.pk,
        car_id=car.pk,
        from_status=str(current),
        to_status=str(target),
        actor_kind=str(actor_kind),
        actor_id=actor_id,
    ))

    logger.info(f"Rental {rental.pk}: {current} -> {target} (car {car.pk} available={available})")
    return rental


def transition(
    ctx: RentalContext,
    rental_id: int,
    target: str,
    actor: Principal | None = None,
) -> Rental:
    """Transition a rental in a unit of work of its own."""

    with ctx.begin() as uow:
        return apply_transition(uow, ctx, rental_id, target, actor=actor)


def cancel_customer_rental(ctx: RentalContext, rental_id: int, customer_id: int) -> Rental:
    """
    Customer self-cancel.

    Raises:
        RentalNotFound: no such rental
        Forbidden: the rental belongs to someone else
        InvalidState: the rental is past the point of self-cancel
    """
    with ctx.begin() as uow:
        rental = lock_rental(rental_id, ctx.using)
        if rental.customer_id != customer_id:
            raise Forbidden("You can only cancel your own rentals")
        if rental.status not in CUSTOMER_CANCELLABLE:
            raise InvalidState(f"Rental cannot be cancelled in status {rental.status}")

        return apply_transition(
            uow,
            ctx,
            rental_id,
            RentalStatus.CANCELLED,
            actor=Principal.customer(customer_id),
        )
