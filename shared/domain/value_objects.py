"""
Common Value Objects

Value objects used across the rental and payment contexts:
- Money: Represents monetary amounts with currency
- TimeRange: Represents a rental window (pickup to dropoff)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from shared.domain.base import ValueObject

CENT = Decimal('0.01')
SUPPORTED_CURRENCIES = ('THB', 'USD', 'EUR')


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a monetary amount with currency.
    Immutable and supports arithmetic operations.
    """
    amount: Decimal
    currency: str = 'THB'

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor) -> 'Money':
        """Multiply money by a factor"""
        if not isinstance(factor, (int, Decimal)):
            raise TypeError("Can only multiply Money by int or Decimal")
        return Money(self.amount * factor, self.currency)

    def rounded(self) -> 'Money':
        """Round half-up to whole cents"""
        return Money(self.amount.quantize(CENT, rounding=ROUND_HALF_UP), self.currency)

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """
    Half-open time window [start, end)

    Used for rental periods: a dropoff at 10:00 and a pickup at 10:00
    on the same car do not collide.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start ({self.start}) must be before end ({self.end})")

    def overlaps_with(self, other: 'TimeRange') -> bool:
        """
        Check if this window overlaps with another

        Overlap formula: start1 < end2 AND start2 < end1
        """
        if not isinstance(other, TimeRange):
            raise TypeError("Can only check overlap with another TimeRange")
        return self.start < other.end and other.start < self.end

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def billable_days(self) -> int:
        """Whole days, rounding any partial day up (minimum one)"""
        days, remainder = divmod(self.duration, timedelta(days=1))
        if remainder:
            days += 1
        return max(days, 1)

    def __str__(self):
        return f"{self.start.isoformat()} - {self.end.isoformat()}"

    def __repr__(self):
        return f"TimeRange({self.start!r}, {self.end!r})"
