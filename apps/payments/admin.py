"""Admin registration for payments."""

from __future__ import annotations

from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "rental", "amount", "status", "method", "recorded_by", "payment_date", "created_at")
    list_filter = ("status", "method")
    search_fields = ("transaction_id", "slip_reference", "rental__customer__email")
    readonly_fields = ("created_at", "updated_at")
