"""Rental cost calculation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from shared.domain.base import ValueObject
from shared.domain.errors import InvalidDates, InvalidRate
from shared.domain.value_objects import Money, TimeRange

DEFAULT_TAX_RATE = Decimal("0.07")


@dataclass(frozen=True)
class CostQuote(ValueObject):
    days: int
    base: Money
    tax: Money
    total: Money

    def to_dict(self) -> dict:
        return {
            "days": self.days,
            "base": str(self.base.amount),
            "tax": str(self.tax.amount),
            "total": str(self.total.amount),
            "currency": self.total.currency,
        }


def quote_cost(
    pickup: datetime,
    dropoff: datetime,
    day_rate,
    tax_rate: Decimal = DEFAULT_TAX_RATE,
    currency: str = "THB",
) -> CostQuote:
    """
    Price a rental window.

    Every started 24 hours is a billable day, with a minimum of one.
    Tax is applied on the base and only the total is rounded, half-up
    to two places.

    Raises:
        InvalidDates: dropoff is not after pickup
        InvalidRate: day rate is not positive
    """
    if dropoff <= pickup:
        raise InvalidDates("Dropoff date must be after pickup date")

    rate = Decimal(str(day_rate))
    if rate <= 0:
        raise InvalidRate()

    days = TimeRange(pickup, dropoff).billable_days()
    base = Money(rate, currency) * days
    tax = base * Decimal(str(tax_rate))
    return CostQuote(days=days, base=base, tax=tax, total=(base + tax).rounded())


def calculate_cost(pickup: datetime, dropoff: datetime, day_rate, tax_rate: Decimal = DEFAULT_TAX_RATE) -> Decimal:
    return quote_cost(pickup, dropoff, day_rate, tax_rate).total.amount
