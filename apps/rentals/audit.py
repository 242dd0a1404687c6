"""Structured audit log for committed rental events."""

from __future__ import annotations

import structlog  # type: ignore

from shared.application.message_bus import MessageBus

from .domain.events import RentalInitiated, RentalStatusChanged

logger = structlog.get_logger("apps.rentals.audit")


def log_rental_initiated(event: RentalInitiated) -> None:
    logger.info(
        "rental.initiated",
        event_id=str(event.event_id),
        rental_id=event.rental_id,
        customer_id=event.customer_id,
        car_id=event.car_id,
        pickup_date=event.pickup_date.isoformat(),
        dropoff_date=event.dropoff_date.isoformat(),
    )


def log_rental_status_changed(event: RentalStatusChanged) -> None:
    logger.info(
        "rental.status_changed",
        event_id=str(event.event_id),
        rental_id=event.rental_id,
        car_id=event.car_id,
        from_status=event.from_status,
        to_status=event.to_status,
        actor_kind=event.actor_kind,
        actor_id=event.actor_id,
    )


def build_message_bus() -> MessageBus:
    bus = MessageBus()
    bus.register_event_handler(RentalInitiated, log_rental_initiated)
    bus.register_event_handler(RentalStatusChanged, log_rental_status_changed)
    return bus
