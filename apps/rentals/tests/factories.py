"""Small builders shared by the rental and payment tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from itertools import count

from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.accounts.models import Customer, Employee
from apps.fleet.models import Branch, Car
from apps.rentals.domain.lifecycle import RentalStatus
from apps.rentals.models import Rental

_seq = count(1)


def make_customer(name: str = "Somchai") -> Customer:
    n = next(_seq)
    user = get_user_model().objects.create_user(username=f"customer{n}", password="CustomerPass123")
    return Customer.objects.create(user=user, name=name, email=f"customer{n}@example.com", phone="+66800000000")


def make_employee(role: str = Employee.Role.MANAGER) -> Employee:
    n = next(_seq)
    user = get_user_model().objects.create_user(username=f"employee{n}", password="EmployeePass123")
    return Employee.objects.create(user=user, name=f"Staff {n}", email=f"staff{n}@example.com", role=role)


def make_branch(address: str | None = "99 Sukhumvit Rd, Bangkok") -> Branch:
    return Branch.objects.create(name="Bangkok Central", address=address, phone="+6621234567")


def make_car(branch: Branch | None = None, price_per_day: str = "1000.00") -> Car:
    return Car.objects.create(
        brand="Toyota",
        model="Yaris",
        price_per_day=Decimal(price_per_day),
        branch=branch or make_branch(),
        parking_spot="A-1",
    )


def window(days_ahead: int = 1, days: int = 2) -> tuple[datetime, datetime]:
    pickup = (timezone.now() + timedelta(days=days_ahead)).replace(minute=0, second=0, microsecond=0)
    return pickup, pickup + timedelta(days=days)


def make_rental(customer: Customer, car: Car, status: str = RentalStatus.PENDING, **kwargs) -> Rental:
    pickup, dropoff = kwargs.pop("dates", None) or window()
    return Rental.objects.create(
        customer=customer,
        car=car,
        pickup_date=pickup,
        dropoff_date=dropoff,
        status=status,
        **kwargs,
    )
