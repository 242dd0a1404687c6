"""Rental records and their status audit trail."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .domain.lifecycle import OCCUPYING, RentalStatus


class Rental(models.Model):
    """A customer's reservation of one car for a [pickup, dropoff) window."""

    Status = RentalStatus

    customer = models.ForeignKey(
        "accounts.Customer",
        on_delete=models.PROTECT,
        related_name="rentals",
    )
    car = models.ForeignKey(
        "fleet.Car",
        on_delete=models.PROTECT,
        related_name="rentals",
    )
    pickup_date = models.DateTimeField()
    dropoff_date = models.DateTimeField()
    pickup_location = models.CharField(max_length=500, blank=True, null=True)
    status = models.CharField(
        max_length=32,
        choices=RentalStatus.choices,
        default=RentalStatus.PENDING,
    )
    booking_date = models.DateTimeField(
        null=True,
        blank=True,
        help_text=_("Set when the rental is confirmed."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Rental")
        verbose_name_plural = _("Rentals")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(dropoff_date__gt=models.F("pickup_date")),
                name="rental_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["car", "pickup_date", "dropoff_date"], name="rental_car_window_idx"),
            models.Index(fields=["status"], name="rental_status_idx"),
            models.Index(fields=["customer", "status"], name="rental_customer_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Rental #{self.pk} ({self.status})"

    @property
    def is_occupying(self) -> bool:
        return self.status in OCCUPYING


class RentalStatusLog(models.Model):
    """One row per status change, written in the transition's transaction."""

    class ActorKind(models.TextChoices):
        CUSTOMER = "customer", _("Customer")
        EMPLOYEE = "employee", _("Employee")
        SYSTEM = "system", _("System")

    rental = models.ForeignKey(
        Rental,
        on_delete=models.CASCADE,
        related_name="status_logs",
    )
    from_status = models.CharField(max_length=32, choices=RentalStatus.choices)
    to_status = models.CharField(max_length=32, choices=RentalStatus.choices)
    actor_kind = models.CharField(
        max_length=16,
        choices=ActorKind.choices,
        default=ActorKind.SYSTEM,
    )
    actor_id = models.BigIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Rental status change")
        verbose_name_plural = _("Rental status changes")
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"{self.rental_id}: {self.from_status} -> {self.to_status}"
