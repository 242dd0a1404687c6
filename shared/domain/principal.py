"""
Authenticated Principal

A typed value describing who is calling a core operation. It is built
once at the boundary from the authenticated user and passed by value.
"""

from dataclasses import dataclass
from enum import Enum

from shared.domain.base import ValueObject
from shared.domain.errors import Forbidden


class PrincipalKind(str, Enum):
    CUSTOMER = 'customer'
    EMPLOYEE = 'employee'


@dataclass(frozen=True)
class Principal(ValueObject):
    kind: PrincipalKind
    id: int
    role: str | None = None

    @classmethod
    def customer(cls, customer_id: int) -> 'Principal':
        return cls(PrincipalKind.CUSTOMER, customer_id)

    @classmethod
    def employee(cls, employee_id: int, role: str | None = None) -> 'Principal':
        return cls(PrincipalKind.EMPLOYEE, employee_id, role)

    @property
    def is_customer(self) -> bool:
        return self.kind == PrincipalKind.CUSTOMER

    @property
    def is_employee(self) -> bool:
        return self.kind == PrincipalKind.EMPLOYEE

    def require_customer(self) -> int:
        if not self.is_customer:
            raise Forbidden('Customer account required')
        return self.id

    def require_employee(self) -> int:
        if not self.is_employee:
            raise Forbidden('Employee account required')
        return self.id

    def __str__(self):
        return f"{self.kind.value}:{self.id}"
