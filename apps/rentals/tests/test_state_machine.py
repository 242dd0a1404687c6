"""Tests for rental status transitions and the derived car availability."""

from __future__ import annotations

from datetime import timedelta

from django.test import TestCase

from apps.fleet.models import Car
from apps.rentals.application.state_machine import apply_transition, cancel_customer_rental, transition
from apps.rentals.domain.events import RentalStatusChanged
from apps.rentals.domain.lifecycle import RentalStatus
from apps.rentals.models import Rental, RentalStatusLog
from shared.application.context import RentalContext
from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork
from shared.domain.errors import CarNotAvailable, Forbidden, InvalidState, InvalidTransition, RentalNotFound
from shared.domain.principal import Principal

from .factories import make_car, make_customer, make_employee, make_rental, window


class TransitionTests(TestCase):
    def setUp(self) -> None:
        self.ctx = RentalContext.from_settings()
        self.customer = make_customer()
        self.employee = make_employee()
        self.car = make_car()

    def _car(self) -> Car:
        return Car.objects.get(pk=self.car.pk)

    def test_occupying_status_marks_car_unavailable(self) -> None:
        rental = make_rental(self.customer, self.car)

        updated = transition(self.ctx, rental.pk, RentalStatus.BOOKED)

        self.assertEqual(updated.status, RentalStatus.BOOKED)
        self.assertFalse(self._car().availability)

    def test_confirm_sets_booking_date(self) -> None:
        rental = make_rental(self.customer, self.car, status=RentalStatus.BOOKED)

        transition(self.ctx, rental.pk, RentalStatus.CONFIRMED)

        rental.refresh_from_db()
        self.assertEqual(rental.status, RentalStatus.CONFIRMED)
        self.assertIsNotNone(rental.booking_date)

    def test_full_lifecycle_frees_car_on_return(self) -> None:
        rental = make_rental(self.customer, self.car)
        for target in (RentalStatus.BOOKED, RentalStatus.CONFIRMED, RentalStatus.ACTIVE):
            transition(self.ctx, rental.pk, target)
        self.assertFalse(self._car().availability)

        transition(self.ctx, rental.pk, RentalStatus.RETURNED)

        self.assertTrue(self._car().availability)

    def test_pending_to_active_is_rejected(self) -> None:
        rental = make_rental(self.customer, self.car)

        with self.assertRaises(InvalidTransition):
            transition(self.ctx, rental.pk, RentalStatus.ACTIVE)

        rental.refresh_from_db()
        self.assertEqual(rental.status, RentalStatus.PENDING)
        self.assertFalse(RentalStatusLog.objects.exists())

    def test_terminal_status_rejects_repeat(self) -> None:
        rental = make_rental(self.customer, self.car)
        transition(self.ctx, rental.pk, RentalStatus.CANCELLED)

        for _ in range(2):
            with self.assertRaises(InvalidTransition):
                transition(self.ctx, rental.pk, RentalStatus.CANCELLED)

    def test_missing_rental(self) -> None:
        with self.assertRaises(RentalNotFound):
            transition(self.ctx, 999_999, RentalStatus.BOOKED)

    def test_cancel_keeps_car_unavailable_while_other_rental_occupies_it(self) -> None:
        first = make_rental(self.customer, self.car, status=RentalStatus.PENDING, dates=window(1, 2))
        make_rental(self.customer, self.car, status=RentalStatus.CONFIRMED, dates=window(5, 2))
        transition(self.ctx, first.pk, RentalStatus.BOOKED)

        transition(self.ctx, first.pk, RentalStatus.CANCELLED)

        self.assertFalse(self._car().availability)

    def test_finished_rental_does_not_block_release(self) -> None:
        past = (self.ctx.now() - timedelta(days=5), self.ctx.now() - timedelta(days=3))
        make_rental(self.customer, self.car, status=RentalStatus.ACTIVE, dates=past)
        rental = make_rental(self.customer, self.car, status=RentalStatus.ACTIVE)
        Car.objects.filter(pk=self.car.pk).update(availability=False)

        transition(self.ctx, rental.pk, RentalStatus.RETURNED)

        self.assertTrue(self._car().availability)

    def test_booking_over_an_occupied_window_is_refused(self) -> None:
        pickup, dropoff = window(1, 3)
        make_rental(self.customer, self.car, status=RentalStatus.CONFIRMED, dates=(pickup, dropoff))
        rival = make_rental(
            make_customer("Malee"),
            self.car,
            dates=(pickup + timedelta(days=1), dropoff + timedelta(days=1)),
        )

        with self.assertRaises(CarNotAvailable):
            transition(self.ctx, rival.pk, RentalStatus.BOOKED)

        rival.refresh_from_db()
        self.assertEqual(rival.status, RentalStatus.PENDING)

    def test_each_transition_writes_an_audit_row(self) -> None:
        rental = make_rental(self.customer, self.car)
        actor = Principal.employee(self.employee.pk, self.employee.role)

        transition(self.ctx, rental.pk, RentalStatus.BOOKED, actor=actor)
        transition(self.ctx, rental.pk, RentalStatus.CONFIRMED, actor=actor)

        logs = list(RentalStatusLog.objects.filter(rental=rental).values_list("from_status", "to_status", "actor_kind", "actor_id"))
        self.assertEqual(
            logs,
            [
                (RentalStatus.PENDING, RentalStatus.BOOKED, "employee", self.employee.pk),
                (RentalStatus.BOOKED, RentalStatus.CONFIRMED, "employee", self.employee.pk),
            ],
        )

    def test_status_change_event_is_published_after_commit(self) -> None:
        received: list = []
        bus = MessageBus()
        bus.register_event_handler(RentalStatusChanged, received.append)
        ctx = RentalContext.from_settings(bus=bus)
        rental = make_rental(self.customer, self.car)

        with self.captureOnCommitCallbacks(execute=True):
            transition(ctx, rental.pk, RentalStatus.BOOKED)
            self.assertEqual(received, [])

        self.assertEqual(len(received), 1)
        self.assertEqual(received[0].rental_id, rental.pk)
        self.assertEqual(received[0].to_status, "Booked")
        self.assertEqual(received[0].actor_kind, "system")


class ApplyTransitionTests(TestCase):
    def setUp(self) -> None:
        self.ctx = RentalContext.from_settings()
        self.customer = make_customer()
        self.car = make_car()

    def test_requires_an_active_unit_of_work(self) -> None:
        rental = make_rental(self.customer, self.car)

        with self.assertRaises(RuntimeError):
            apply_transition(DjangoUnitOfWork(), self.ctx, rental.pk, RentalStatus.BOOKED)

    def test_caller_failure_rolls_back_the_transition(self) -> None:
        rental = make_rental(self.customer, self.car)

        with self.assertRaises(ValueError):
            with self.ctx.begin() as uow:
                apply_transition(uow, self.ctx, rental.pk, RentalStatus.BOOKED)
                raise ValueError("later step failed")

        rental.refresh_from_db()
        self.assertEqual(rental.status, RentalStatus.PENDING)
        self.assertTrue(Car.objects.get(pk=self.car.pk).availability)
        self.assertFalse(RentalStatusLog.objects.exists())

    def test_several_steps_share_one_unit_of_work(self) -> None:
        rental = make_rental(self.customer, self.car)

        with self.ctx.begin() as uow:
            apply_transition(uow, self.ctx, rental.pk, RentalStatus.BOOKED)
            apply_transition(uow, self.ctx, rental.pk, RentalStatus.CONFIRMED)

        rental.refresh_from_db()
        self.assertEqual(rental.status, RentalStatus.CONFIRMED)
        self.assertEqual(RentalStatusLog.objects.filter(rental=rental).count(), 2)


class CustomerCancelTests(TestCase):
    def setUp(self) -> None:
        self.ctx = RentalContext.from_settings()
        self.customer = make_customer()
        self.car = make_car()

    def test_owner_can_cancel_confirmed_rental(self) -> None:
        rental = make_rental(self.customer, self.car, status=RentalStatus.CONFIRMED)

        cancelled = cancel_customer_rental(self.ctx, rental.pk, self.customer.pk)

        self.assertEqual(cancelled.status, RentalStatus.CANCELLED)
        log = RentalStatusLog.objects.get(rental=rental)
        self.assertEqual((log.actor_kind, log.actor_id), ("customer", self.customer.pk))

    def test_other_customer_is_forbidden(self) -> None:
        rental = make_rental(self.customer, self.car)
        stranger = make_customer("Stranger")

        with self.assertRaises(Forbidden):
            cancel_customer_rental(self.ctx, rental.pk, stranger.pk)

    def test_active_rental_cannot_be_self_cancelled(self) -> None:
        rental = make_rental(self.customer, self.car, status=RentalStatus.ACTIVE)

        with self.assertRaises(InvalidState):
            cancel_customer_rental(self.ctx, rental.pk, self.customer.pk)

        self.assertEqual(Rental.objects.get(pk=rental.pk).status, RentalStatus.ACTIVE)
