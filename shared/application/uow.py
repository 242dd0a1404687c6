"""
Unit of Work Pattern

Owns one database transaction and the domain events recorded inside
it. Events are published only after a successful commit.

Ownership is explicit: an operation either opens a unit of work with
``with ctx.begin() as uow:`` and owns the commit, or receives an active
unit of work from its caller and must not commit or roll back on its own.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import DEFAULT_DB_ALIAS, DatabaseError, transaction

from shared.domain.base import DomainEvent
from shared.domain.errors import StorageFailure

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the transaction"""
        pass

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""
        pass

    @abstractmethod
    def record(self, event: DomainEvent):
        """Record an event to publish after commit"""
        pass


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Usage:
        with DjangoUnitOfWork(using="default", bus=bus) as uow:
            rental = apply_transition(uow, ctx, rental_id, RentalStatus.CONFIRMED)
            # Transaction commits here
        # Events are published after commit

    Database errors raised inside the block, or by the commit itself,
    are rolled back and re-raised as StorageFailure.
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS, bus=None):
        self.using = using
        self._bus = bus
        self._events: List[DomainEvent] = []
        self._transaction = None
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    def ensure_active(self):
        """Guard for operations that must join a caller-owned transaction"""
        if not self._active:
            raise RuntimeError("Unit of work is not active; open it with a 'with' block first")
        if not transaction.get_connection(self.using).in_atomic_block:
            raise RuntimeError("Unit of work has no open transaction")

    def __enter__(self):
        """Start database transaction"""
        if self._active:
            raise RuntimeError("Unit of work is already active")
        self._transaction = transaction.atomic(using=self.using)
        self._transaction.__enter__()
        self._active = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self._active = False

        try:
            self._transaction.__exit__(exc_type, exc_val, exc_tb)
        except DatabaseError as e:
            logger.error(f"Commit failed on '{self.using}': {e}")
            raise StorageFailure() from e
        finally:
            self._transaction = None

        if exc_type is not None and issubclass(exc_type, DatabaseError):
            logger.error(f"Database error inside unit of work, rolled back: {exc_val}")
            raise StorageFailure() from exc_val
        return False

    def commit(self):
        """
        Schedule event publishing

        Events are handed to transaction.on_commit() so they are only
        sent after the database commit succeeds.
        """
        logger.debug(f"Committing transaction with {len(self._events)} events")

        events = self._events.copy()
        self._events.clear()

        if events and self._bus is not None:
            bus = self._bus
            transaction.on_commit(lambda: self._publish_events(bus, events), using=self.using)

    def rollback(self):
        """Rollback changes and discard events"""
        logger.warning(f"Rolling back transaction, discarding {len(self._events)} events")
        self._events.clear()

    def record(self, event: DomainEvent):
        self._events.append(event)

    @staticmethod
    def _publish_events(bus, events: List[DomainEvent]):
        logger.info(f"Publishing {len(events)} domain events after commit")
        bus.publish_events(events)
