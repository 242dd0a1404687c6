"""Domain events raised by the rental lifecycle."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class RentalInitiated(DomainEvent):
    """A customer created a Pending rental"""
    rental_id: int
    customer_id: int
    car_id: int
    pickup_date: datetime
    dropoff_date: datetime

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'rental_id': self.rental_id,
            'customer_id': self.customer_id,
            'car_id': self.car_id,
            'pickup_date': self.pickup_date.isoformat(),
            'dropoff_date': self.dropoff_date.isoformat(),
        })
        return data


@dataclass(kw_only=True)
class RentalStatusChanged(DomainEvent):
    """A rental moved along the lifecycle"""
    rental_id: int
    car_id: int
    from_status: str
    to_status: str
    actor_kind: Optional[str] = None
    actor_id: Optional[int] = None

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'rental_id': self.rental_id,
            'car_id': self.car_id,
            'from_status': self.from_status,
            'to_status': self.to_status,
            'actor_kind': self.actor_kind,
            'actor_id': self.actor_id,
        })
        return data
