"""Random booking and lifecycle traffic never double-books a car."""

from __future__ import annotations

import random
from datetime import timedelta

from django.test import TestCase

from apps.rentals.application.booking import initiate_booking
from apps.rentals.application.state_machine import transition
from apps.rentals.domain.lifecycle import OCCUPYING, TERMINAL, TRANSITIONS, RentalStatus
from apps.rentals.models import Rental
from shared.application.context import RentalContext
from shared.domain.errors import CarNotAvailable

from .factories import make_car, make_customer, window

STEPS = 120


class OccupancyInvariantTests(TestCase):
    def setUp(self) -> None:
        self.customers = [make_customer(f"Customer {n}") for n in range(3)]
        self.cars = [make_car(), make_car()]
        self.start = window(1, 1)[0]

    def _random_window(self, rng: random.Random):
        pickup = self.start + timedelta(hours=rng.randint(0, 24 * 10))
        return pickup, pickup + timedelta(hours=rng.randint(1, 96))

    def _drive(self, ctx: RentalContext, rng: random.Random) -> dict[str, int]:
        counts = {"booked": 0, "refused": 0, "moved": 0}
        for _ in range(STEPS):
            live = list(Rental.objects.exclude(status__in=TERMINAL).order_by("pk"))
            if not live or rng.random() < 0.5:
                pickup, dropoff = self._random_window(rng)
                try:
                    initiate_booking(ctx, rng.choice(self.customers).pk, rng.choice(self.cars).pk, pickup, dropoff)
                    counts["booked"] += 1
                except CarNotAvailable:
                    counts["refused"] += 1
                continue

            rental = rng.choice(live)
            target = rng.choice(sorted(TRANSITIONS[rental.status]))
            try:
                transition(ctx, rental.pk, target)
                counts["moved"] += 1
            except CarNotAvailable:
                counts["refused"] += 1
        return counts

    def _assert_no_double_booking(self, blocking: set[str]) -> None:
        for car in self.cars:
            held = list(Rental.objects.filter(car=car, status__in=blocking).order_by("pickup_date"))
            for earlier, later in zip(held, held[1:]):
                self.assertLessEqual(
                    earlier.dropoff_date,
                    later.pickup_date,
                    f"rentals {earlier.pk} and {later.pk} overlap on car {car.pk}",
                )

    def test_pending_holding_the_slot(self) -> None:
        ctx = RentalContext.from_settings(pending_holds_slot=True)

        counts = self._drive(ctx, random.Random(20240601))

        self.assertGreater(counts["booked"], 0)
        self.assertGreater(counts["moved"], 0)
        self._assert_no_double_booking(set(OCCUPYING) | {RentalStatus.PENDING})

    def test_pending_not_holding_the_slot(self) -> None:
        ctx = RentalContext.from_settings(pending_holds_slot=False)

        counts = self._drive(ctx, random.Random(7))

        self.assertGreater(counts["booked"], 0)
        self.assertGreater(counts["moved"], 0)
        self._assert_no_double_booking(set(OCCUPYING))
