"""Celery tasks for the rental lifecycle."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from shared.application.context import RentalContext
from shared.domain.errors import InvalidTransition, RentalCoreError

from .application.state_machine import transition
from .domain.lifecycle import RentalStatus
from .models import Rental

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="rentals.cancel_stale_pending_rentals")
def cancel_stale_pending_rentals() -> dict[str, int]:
    """
    Cancel Pending rentals nobody paid for.

    A rental still Pending after RENTAL_PENDING_EXPIRY_MINUTES is
    cancelled through the state machine, one transaction per rental.
    Rentals that moved on in the meantime are skipped.

    Returns:
        dict: {"cancelled": number cancelled, "skipped": number skipped}
    """
    ctx = RentalContext.from_settings()
    cutoff = ctx.now() - ctx.pending_expiry
    cancelled = skipped = 0

    stale_ids = list(
        Rental.objects.using(ctx.using)
        .filter(status=RentalStatus.PENDING, created_at__lte=cutoff)
        .values_list("pk", flat=True)
    )

    for rental_id in stale_ids:
        try:
            transition(ctx, rental_id, RentalStatus.CANCELLED)
            cancelled += 1
        except InvalidTransition:
            # Paid or cancelled between the query and the lock
            skipped += 1
        except RentalCoreError as e:
            skipped += 1
            logger.error(f"Error cancelling stale rental {rental_id}: {e}", exc_info=True)

    if cancelled:
        logger.info(f"Cancelled {cancelled} stale pending rentals")

    return {"cancelled": cancelled, "skipped": skipped}
