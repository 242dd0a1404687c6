"""Admin registrations for the fleet."""

from __future__ import annotations

from django.contrib import admin

from .models import Branch, Car


class CarInline(admin.TabularInline):
    model = Car
    extra = 0
    fields = ("brand", "model", "price_per_day", "availability", "parking_spot")
    readonly_fields = ("availability",)


@admin.register(Branch)
class BranchAdmin(admin.ModelAdmin):
    list_display = ("name", "address", "phone", "created_at")
    search_fields = ("name", "address")
    inlines = [CarInline]


@admin.register(Car)
class CarAdmin(admin.ModelAdmin):
    list_display = ("brand", "model", "branch", "price_per_day", "availability", "parking_spot")
    list_filter = ("branch", "availability", "brand")
    search_fields = ("brand", "model", "parking_spot")
    # Written by the rental state machine only
    readonly_fields = ("availability", "created_at", "updated_at")
