"""Permission classes for rental and payment endpoints."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def _is_employee(user) -> bool:
    return bool(user and user.is_authenticated and getattr(user, "employee", None) is not None)


def _is_customer(user) -> bool:
    return bool(user and user.is_authenticated and getattr(user, "customer", None) is not None)


class IsEmployee(permissions.BasePermission):
    """Only staff with an Employee record."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _is_employee(request.user)


class IsCustomer(permissions.BasePermission):
    """Only users with a Customer record."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _is_customer(request.user)


class IsCustomerOrEmployee(permissions.BasePermission):
    """
    Any account with a rental identity.

    Ownership of individual rentals is checked by the core operations.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _is_employee(request.user) or _is_customer(request.user)
