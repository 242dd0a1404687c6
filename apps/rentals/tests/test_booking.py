"""Tests for the booking orchestrator."""

from __future__ import annotations

import threading
from datetime import timedelta
from decimal import Decimal

from django.db import connection
from django.test import TestCase, TransactionTestCase, skipUnlessDBFeature

from apps.fleet.models import Car
from apps.rentals.application.booking import initiate_booking, quote_rental_cost
from apps.rentals.domain.events import RentalInitiated
from apps.rentals.domain.lifecycle import RentalStatus
from apps.rentals.models import Rental
from shared.application.context import RentalContext
from shared.application.message_bus import MessageBus
from shared.domain.errors import CarNotAvailable, CarNotFound, InvalidDates, RentalNotFound

from .factories import make_branch, make_car, make_customer, make_rental, window


class InitiateBookingTests(TestCase):
    def setUp(self) -> None:
        self.ctx = RentalContext.from_settings()
        self.customer = make_customer()
        self.car = make_car()

    def test_booking_round_trip(self) -> None:
        pickup, dropoff = window()

        rental = initiate_booking(self.ctx, self.customer.pk, self.car.pk, pickup, dropoff)

        stored = Rental.objects.get(pk=rental.pk)
        self.assertEqual(stored.status, RentalStatus.PENDING)
        self.assertEqual(stored.pickup_date, pickup)
        self.assertEqual(stored.dropoff_date, dropoff)
        self.assertIsNotNone(stored.created_at)

    def test_booking_leaves_car_availability_alone(self) -> None:
        initiate_booking(self.ctx, self.customer.pk, self.car.pk, *window())

        self.assertTrue(Car.objects.get(pk=self.car.pk).availability)

    def test_pickup_location_defaults_to_branch_address(self) -> None:
        rental = initiate_booking(self.ctx, self.customer.pk, self.car.pk, *window())

        self.assertEqual(rental.pickup_location, "99 Sukhumvit Rd, Bangkok")

    def test_explicit_pickup_location_wins(self) -> None:
        rental = initiate_booking(self.ctx, self.customer.pk, self.car.pk, *window(), pickup_location="Airport")

        self.assertEqual(rental.pickup_location, "Airport")

    def test_branch_without_address_leaves_location_empty(self) -> None:
        car = make_car(branch=make_branch(address=None))

        rental = initiate_booking(self.ctx, self.customer.pk, car.pk, *window())

        self.assertIsNone(rental.pickup_location)

    def test_invalid_ids(self) -> None:
        for customer_id, car_id in ((0, self.car.pk), (self.customer.pk, -1)):
            with self.assertRaises(InvalidDates):
                initiate_booking(self.ctx, customer_id, car_id, *window())

    def test_dropoff_must_follow_pickup(self) -> None:
        pickup, _ = window()

        with self.assertRaises(InvalidDates):
            initiate_booking(self.ctx, self.customer.pk, self.car.pk, pickup, pickup)

    def test_pickup_in_the_past_respects_grace_window(self) -> None:
        now = self.ctx.now()

        initiate_booking(self.ctx, self.customer.pk, self.car.pk, now - timedelta(minutes=30), now + timedelta(days=1))
        with self.assertRaises(InvalidDates):
            initiate_booking(
                self.ctx,
                self.customer.pk,
                make_car().pk,
                now - timedelta(hours=2),
                now + timedelta(days=1),
            )

    def test_missing_car(self) -> None:
        with self.assertRaises(CarNotFound):
            initiate_booking(self.ctx, self.customer.pk, 999_999, *window())

    def test_overlap_is_refused(self) -> None:
        pickup, dropoff = window(1, 3)
        initiate_booking(self.ctx, self.customer.pk, self.car.pk, pickup, dropoff)

        with self.assertRaises(CarNotAvailable):
            initiate_booking(
                self.ctx,
                make_customer("Malee").pk,
                self.car.pk,
                pickup + timedelta(days=1),
                dropoff + timedelta(days=1),
            )
        self.assertEqual(Rental.objects.count(), 1)

    def test_back_to_back_rentals_are_allowed(self) -> None:
        pickup, dropoff = window(1, 2)
        initiate_booking(self.ctx, self.customer.pk, self.car.pk, pickup, dropoff)

        initiate_booking(self.ctx, self.customer.pk, self.car.pk, dropoff, dropoff + timedelta(days=2))

        self.assertEqual(Rental.objects.count(), 2)

    def test_terminal_rentals_do_not_block(self) -> None:
        pickup, dropoff = window()
        make_rental(self.customer, self.car, status=RentalStatus.CANCELLED, dates=(pickup, dropoff))

        rental = initiate_booking(self.ctx, self.customer.pk, self.car.pk, pickup, dropoff)

        self.assertEqual(rental.status, RentalStatus.PENDING)

    def test_pending_does_not_block_when_policy_says_so(self) -> None:
        ctx = RentalContext.from_settings(pending_holds_slot=False)
        pickup, dropoff = window()
        make_rental(self.customer, self.car, dates=(pickup, dropoff))

        rental = initiate_booking(ctx, self.customer.pk, self.car.pk, pickup, dropoff)

        self.assertEqual(rental.status, RentalStatus.PENDING)

    def test_initiated_event_is_published(self) -> None:
        received: list = []
        bus = MessageBus()
        bus.register_event_handler(RentalInitiated, received.append)
        ctx = RentalContext.from_settings(bus=bus)

        with self.captureOnCommitCallbacks(execute=True):
            rental = initiate_booking(ctx, self.customer.pk, self.car.pk, *window())

        self.assertEqual([event.rental_id for event in received], [rental.pk])


class QuoteRentalCostTests(TestCase):
    def test_quote_for_existing_rental(self) -> None:
        ctx = RentalContext.from_settings()
        rental = make_rental(make_customer(), make_car(price_per_day="1000.00"), dates=window(1, 2))

        quote = quote_rental_cost(ctx, rental.pk)

        self.assertEqual(quote.days, 2)
        self.assertEqual(quote.total.amount, Decimal("2140.00"))

    def test_missing_rental(self) -> None:
        with self.assertRaises(RentalNotFound):
            quote_rental_cost(RentalContext.from_settings(), 424242)


@skipUnlessDBFeature("has_select_for_update")
class ConcurrentBookingTests(TransactionTestCase):
    """Needs real row locks, so it only runs on PostgreSQL or MySQL."""

    def test_exactly_one_of_two_simultaneous_bookings_wins(self) -> None:
        car = make_car()
        customers = [make_customer("A"), make_customer("B")]
        pickup, dropoff = window(2, 3)
        barrier = threading.Barrier(len(customers))
        outcomes: list = []

        def book(customer_id: int) -> None:
            try:
                barrier.wait()
                initiate_booking(RentalContext.from_settings(), customer_id, car.pk, pickup, dropoff)
                outcomes.append("booked")
            except CarNotAvailable:
                outcomes.append("refused")
            finally:
                connection.close()

        threads = [threading.Thread(target=book, args=(c.pk,)) for c in customers]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(sorted(outcomes), ["booked", "refused"])
        self.assertEqual(Rental.objects.filter(car=car).count(), 1)
