"""
Payment Reconciliation

Three ways money reaches a rental, all feeding the rental state machine
inside the same unit of work:

- process_slip_upload: customer uploads proof, rental becomes Booked
- process_payment: staff record a payment; Paid confirms the rental
- verify_payment: staff approve or reject an uploaded slip
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
import logging

from django.db.models import QuerySet  # type: ignore

from apps.payments.application.locking import lock_payment_and_rental
from apps.payments.models import Payment
from apps.rentals.application.state_machine import apply_transition
from apps.rentals.domain.lifecycle import RentalStatus
from apps.rentals.domain.pricing import quote_cost
from apps.rentals.models import Rental
from shared.application.context import RentalContext
from shared.domain.errors import (
    Forbidden,
    InvalidInput,
    InvalidState,
    PaymentNotFound,
    RentalNotFound,
)
from shared.domain.principal import Principal

logger = logging.getLogger(__name__)

SLIP_PAYMENT_METHOD = "Bank Transfer"

# Statuses staff may record by hand; Pending Verification only comes from slips
RECORDABLE_STATUSES = frozenset({
    Payment.Status.PENDING,
    Payment.Status.PAID,
    Payment.Status.FAILED,
    Payment.Status.REFUNDED,
})

VERIFIABLE_RENTAL_STATUSES = frozenset({
    RentalStatus.BOOKED,
    RentalStatus.PENDING_VERIFICATION,
})


def _expected_total(ctx: RentalContext, rental: Rental) -> Decimal:
    return quote_cost(
        rental.pickup_date,
        rental.dropoff_date,
        rental.car.price_per_day,
        ctx.tax_rate,
        ctx.currency,
    ).total.amount


def process_slip_upload(ctx: RentalContext, rental_id: int, customer_id: int, proof_ref: str) -> Payment:
    """
    Attach proof of payment to a Pending rental and book it.

    A first upload creates a Pending Verification payment for the quoted
    total. A re-upload over a Pending or Failed payment reuses that row.

    Raises:
        RentalNotFound, Forbidden, InvalidState, InvalidInput
    """
    if not proof_ref:
        raise InvalidInput("Proof of payment reference is required")

    with ctx.begin() as uow:
        payment, rental = lock_payment_and_rental(rental_id, using=ctx.using)

        if rental.customer_id != customer_id:
            raise Forbidden("You can only upload payment for your own rentals")
        if rental.status != RentalStatus.PENDING:
            raise InvalidState(f"Cannot upload slip for rental in status {rental.status}")

        now = ctx.now()
        if payment is None:
            amount = _expected_total(ctx, rental)
            payment = Payment(
                rental=rental,
                amount=amount,
                status=Payment.Status.PENDING_VERIFICATION,
                method=SLIP_PAYMENT_METHOD,
                slip_reference=proof_ref,
                payment_date=now,
            )
            payment.save(using=ctx.using, force_insert=True)
            logger.info(f"Payment {payment.pk} created for rental {rental.pk} from slip upload")
        elif payment.status in (Payment.Status.PENDING, Payment.Status.FAILED):
            payment.status = Payment.Status.PENDING_VERIFICATION
            payment.method = SLIP_PAYMENT_METHOD
            payment.slip_reference = proof_ref
            payment.payment_date = now
            payment.save(
                using=ctx.using,
                update_fields=["status", "method", "slip_reference", "payment_date", "updated_at"],
            )
            logger.info(f"Payment {payment.pk} re-submitted for rental {rental.pk}")
        else:
            raise InvalidState(f"Cannot upload slip over a payment in status {payment.status}")

        apply_transition(uow, ctx, rental.pk, RentalStatus.BOOKED, actor=Principal.customer(customer_id))

    return payment


def process_payment(
    ctx: RentalContext,
    rental_id: int,
    employee_id: int,
    amount,
    status: str,
    method: str,
    transaction_id: str | None = None,
) -> Payment:
    """
    Staff record a payment.

    A mismatch against the quoted total is logged, not rejected. A Paid
    payment confirms the rental in the same transaction; if that fails
    the payment is rolled back with it.

    Raises:
        InvalidInput: bad ids, negative amount, unknown status, missing
            method, or a transaction id already on file
        RentalNotFound: no such rental
        InvalidState: a second open payment for the rental
        InvalidTransition, CarNotAvailable: from confirming the rental
    """
    if rental_id is None or rental_id <= 0:
        raise InvalidInput("Invalid rental ID")
    if employee_id is None or employee_id <= 0:
        raise InvalidInput("Invalid employee ID")
    try:
        amount = Decimal(str(amount))
    except InvalidOperation:
        raise InvalidInput(f"Invalid amount: {amount!r}")
    if amount < 0:
        raise InvalidInput("Amount cannot be negative")
    if status not in RECORDABLE_STATUSES:
        raise InvalidInput(f"Invalid payment status: {status!r}")
    if not method:
        raise InvalidInput("Payment method is required")
    transaction_id = transaction_id or None

    with ctx.begin() as uow:
        open_payment, rental = lock_payment_and_rental(
            rental_id,
            statuses=Payment.NON_TERMINAL,
            using=ctx.using,
        )
        if open_payment is not None and status in Payment.NON_TERMINAL:
            raise InvalidState(f"Rental {rental.pk} already has open payment {open_payment.pk}")

        if transaction_id and Payment.objects.using(ctx.using).filter(transaction_id=transaction_id).exists():
            raise InvalidInput(f"Transaction ID {transaction_id} is already recorded")

        expected = _expected_total(ctx, rental)
        if expected != amount:
            logger.warning(
                f"Recorded amount {amount} differs from calculated cost {expected} for rental {rental.pk}"
            )

        payment = Payment(
            rental=rental,
            amount=amount,
            status=status,
            method=method,
            recorded_by_id=employee_id,
            transaction_id=transaction_id,
            payment_date=ctx.now(),
        )
        payment.save(using=ctx.using, force_insert=True)
        logger.info(f"Payment {payment.pk} recorded for rental {rental.pk} by employee {employee_id} ({status})")

        if status == Payment.Status.PAID:
            apply_transition(
                uow,
                ctx,
                rental.pk,
                RentalStatus.CONFIRMED,
                actor=Principal.employee(employee_id),
            )

    return payment


def verify_payment(ctx: RentalContext, rental_id: int, approved: bool, employee_id: int) -> Payment:
    """
    Approve or reject the latest Pending Verification payment.

    Approved: payment Paid, rental Confirmed.
    Rejected: payment Failed, rental Cancelled.

    Raises:
        PaymentNotFound: nothing awaiting verification
        InvalidState: the rental is not Booked or Pending Verification
    """
    with ctx.begin() as uow:
        payment, rental = lock_payment_and_rental(
            rental_id,
            statuses=[Payment.Status.PENDING_VERIFICATION],
            using=ctx.using,
        )
        if payment is None:
            raise PaymentNotFound()
        if rental.status not in VERIFIABLE_RENTAL_STATUSES:
            raise InvalidState(f"Cannot verify payment for rental in status {rental.status}")

        if approved:
            payment.status = Payment.Status.PAID
            target = RentalStatus.CONFIRMED
        else:
            payment.status = Payment.Status.FAILED
            target = RentalStatus.CANCELLED
        payment.recorded_by_id = employee_id
        payment.save(using=ctx.using, update_fields=["status", "recorded_by", "updated_at"])

        apply_transition(uow, ctx, rental.pk, target, actor=Principal.employee(employee_id))

    logger.info(f"Payment {payment.pk} for rental {rental_id} {'approved' if approved else 'rejected'} by employee {employee_id}")
    return payment


def payments_for_rental(ctx: RentalContext, rental_id: int, principal: Principal) -> QuerySet:
    """Payments of one rental, newest first. Customers only see their own."""

    try:
        rental = Rental.objects.using(ctx.using).get(pk=rental_id)
    except Rental.DoesNotExist:
        raise RentalNotFound()
    if principal.is_customer and rental.customer_id != principal.id:
        raise Forbidden("You can only view payments for your own rentals")

    return Payment.objects.using(ctx.using).filter(rental_id=rental.pk).select_related("recorded_by")


def payments_pending_verification(ctx: RentalContext) -> QuerySet:
    """Slips waiting for staff, oldest first."""

    return (
        Payment.objects.using(ctx.using)
        .filter(status=Payment.Status.PENDING_VERIFICATION)
        .select_related("rental", "rental__customer", "rental__car")
        .order_by("created_at", "id")
    )
