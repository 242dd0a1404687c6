"""Branches and the cars they rent out."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Branch(models.Model):
    """Rental office; its address is the default pickup location."""

    name = models.CharField(max_length=255)
    address = models.CharField(max_length=500, blank=True, null=True)
    phone = models.CharField(max_length=32, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Branch")
        verbose_name_plural = _("Branches")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Car(models.Model):
    """
    A rentable car.

    ``availability`` is a cached value derived from the car's rentals and
    is only written by the rental state machine.
    """

    brand = models.CharField(max_length=100)
    model = models.CharField(max_length=100)
    price_per_day = models.DecimalField(max_digits=10, decimal_places=2)
    availability = models.BooleanField(default=True)
    parking_spot = models.CharField(max_length=50, blank=True, null=True)
    branch = models.ForeignKey(
        Branch,
        on_delete=models.PROTECT,
        related_name="cars",
    )
    image_url = models.URLField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Car")
        verbose_name_plural = _("Cars")
        ordering = ["brand", "model"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price_per_day__gt=0),
                name="car_price_per_day_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["branch", "availability"], name="car_branch_availability_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.brand} {self.model}"
