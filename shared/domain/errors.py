"""
Core Error Taxonomy

Every failure raised by a core operation belongs to exactly one
ErrorKind. The boundary layer maps kinds to transport status codes
through an explicit table; it never inspects message text.
"""

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = 'not_found'
    INVALID_DATES = 'invalid_dates'
    INVALID_RATE = 'invalid_rate'
    INVALID_INPUT = 'invalid_input'
    CAR_NOT_AVAILABLE = 'car_not_available'
    FORBIDDEN = 'forbidden'
    INVALID_STATE = 'invalid_state'
    INVALID_TRANSITION = 'invalid_transition'
    STORAGE_FAILURE = 'storage_failure'


class RentalCoreError(Exception):
    """Base class for errors raised by core operations."""

    kind: ErrorKind
    default_message = 'Rental operation failed'

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return self.args[0]


class NotFound(RentalCoreError):
    kind = ErrorKind.NOT_FOUND
    default_message = 'Not found'


class RentalNotFound(NotFound):
    default_message = 'Rental not found'


class CarNotFound(NotFound):
    default_message = 'Car not found'


class PaymentNotFound(NotFound):
    default_message = 'Payment not found or not pending verification'


class InvalidDates(RentalCoreError):
    kind = ErrorKind.INVALID_DATES
    default_message = 'Invalid pickup/dropoff dates'


class InvalidRate(RentalCoreError):
    kind = ErrorKind.INVALID_RATE
    default_message = 'Day rate must be positive'


class InvalidInput(RentalCoreError):
    kind = ErrorKind.INVALID_INPUT
    default_message = 'Invalid input'


class CarNotAvailable(RentalCoreError):
    kind = ErrorKind.CAR_NOT_AVAILABLE
    default_message = 'Car is not available for the selected dates'


class Forbidden(RentalCoreError):
    kind = ErrorKind.FORBIDDEN
    default_message = 'Permission denied'


class InvalidState(RentalCoreError):
    kind = ErrorKind.INVALID_STATE
    default_message = 'Invalid operation for current rental/payment state'


class InvalidTransition(RentalCoreError):
    kind = ErrorKind.INVALID_TRANSITION
    default_message = 'Invalid rental status transition'


class StorageFailure(RentalCoreError):
    """Transaction or commit failed; the whole operation may be retried."""

    kind = ErrorKind.STORAGE_FAILURE
    default_message = 'Storage failure, the operation was rolled back'
