"""Payments made against rentals."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Payment(models.Model):
    """A payment attempt for a rental, recorded by staff or created from a slip upload."""

    class Status(models.TextChoices):
        PENDING = "Pending", _("Pending")
        PENDING_VERIFICATION = "Pending Verification", _("Pending Verification")
        PAID = "Paid", _("Paid")
        FAILED = "Failed", _("Failed")
        REFUNDED = "Refunded", _("Refunded")

    # At most one of these per rental
    NON_TERMINAL = (Status.PENDING, Status.PENDING_VERIFICATION)

    rental = models.ForeignKey(
        "rentals.Rental",
        on_delete=models.PROTECT,
        related_name="payments",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    status = models.CharField(max_length=32, choices=Status.choices, default=Status.PENDING)
    method = models.CharField(max_length=50, blank=True)
    recorded_by = models.ForeignKey(
        "accounts.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recorded_payments",
    )
    transaction_id = models.CharField(max_length=100, unique=True, null=True, blank=True)
    slip_reference = models.CharField(
        max_length=500,
        null=True,
        blank=True,
        help_text=_("Stored name of the uploaded proof of payment."),
    )
    payment_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gte=0),
                name="payment_amount_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["rental", "status"], name="payment_rental_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Payment #{self.pk} for rental {self.rental_id} ({self.status})"
