"""Build the typed principal from an authenticated request."""

from __future__ import annotations

from shared.domain.errors import Forbidden
from shared.domain.principal import Principal


def principal_from_user(user) -> Principal:
    """Employees win over customers when a user has both records."""

    if user is None or not user.is_authenticated:
        raise Forbidden("Authentication required")

    employee = getattr(user, "employee", None)
    if employee is not None:
        return Principal.employee(employee.id, employee.role)

    customer = getattr(user, "customer", None)
    if customer is not None:
        return Principal.customer(customer.id)

    raise Forbidden("No customer or employee profile for this account")


def principal_for(request) -> Principal:
    return principal_from_user(getattr(request, "user", None))
