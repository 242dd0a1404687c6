"""
Rental Context

Everything a core operation needs from its surroundings, passed
explicitly: the database alias, a clock, the message bus and the
rental policy values. Built once per request or task.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable

from django.conf import settings  # type: ignore
from django.db import DEFAULT_DB_ALIAS  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork


@dataclass(frozen=True)
class RentalContext:
    using: str = DEFAULT_DB_ALIAS
    clock: Callable[[], datetime] = timezone.now
    bus: MessageBus = field(default_factory=MessageBus)
    tax_rate: Decimal = Decimal("0.07")
    currency: str = "THB"
    pickup_grace: timedelta = timedelta(hours=1)
    pending_holds_slot: bool = True
    pending_expiry: timedelta = timedelta(minutes=30)

    @classmethod
    def from_settings(cls, *, using: str = DEFAULT_DB_ALIAS, bus: MessageBus | None = None, **overrides) -> "RentalContext":
        """Read the RENTAL_* settings into a fresh context."""

        if bus is None:
            from apps.rentals.audit import build_message_bus  # Local import to prevent circular dependency

            bus = build_message_bus()

        values = dict(
            using=using,
            bus=bus,
            tax_rate=Decimal(str(getattr(settings, "RENTAL_TAX_RATE", "0.07"))),
            currency=getattr(settings, "RENTAL_CURRENCY", "THB"),
            pickup_grace=timedelta(minutes=getattr(settings, "RENTAL_PICKUP_GRACE_MINUTES", 60)),
            pending_holds_slot=getattr(settings, "RENTAL_PENDING_HOLDS_SLOT", True),
            pending_expiry=timedelta(minutes=getattr(settings, "RENTAL_PENDING_EXPIRY_MINUTES", 30)),
        )
        values.update(overrides)
        return cls(**values)

    def now(self) -> datetime:
        return self.clock()

    def begin(self) -> DjangoUnitOfWork:
        """Open a unit of work owned by the caller."""
        return DjangoUnitOfWork(using=self.using, bus=self.bus)
