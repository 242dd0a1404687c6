"""Admin registration for rentals."""

from __future__ import annotations

from django.contrib import admin

from .models import Rental, RentalStatusLog


class RentalStatusLogInline(admin.TabularInline):
    model = RentalStatusLog
    extra = 0
    can_delete = False
    fields = ("from_status", "to_status", "actor_kind", "actor_id", "created_at")
    readonly_fields = fields


@admin.register(Rental)
class RentalAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "customer",
        "car",
        "status",
        "pickup_date",
        "dropoff_date",
        "booking_date",
        "created_at",
    )
    list_filter = ("status", "car__branch", "pickup_date")
    search_fields = ("customer__name", "customer__email", "car__brand", "car__model")
    # Status only moves through the state machine
    readonly_fields = ("status", "booking_date", "created_at", "updated_at")
    inlines = [RentalStatusLogInline]
