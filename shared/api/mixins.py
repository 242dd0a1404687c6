"""View helpers for calling core operations."""

from __future__ import annotations

from shared.application.context import RentalContext


class RentalContextMixin:
    """Builds one RentalContext per request from settings."""

    _rental_context: RentalContext | None = None

    def get_rental_context(self) -> RentalContext:
        if self._rental_context is None:
            self._rental_context = RentalContext.from_settings()
        return self._rental_context
