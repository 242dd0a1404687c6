"""Admin registrations for customers and employees."""

from __future__ import annotations

from django.contrib import admin

from .models import Customer, Employee


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "phone", "created_at")
    search_fields = ("name", "email", "phone")
    readonly_fields = ("created_at", "updated_at")


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "role", "created_at")
    list_filter = ("role",)
    search_fields = ("name", "email")
    readonly_fields = ("created_at", "updated_at")
