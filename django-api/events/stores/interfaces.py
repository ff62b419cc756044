"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Uniqueness is enforced by
the store itself; a write that breaks a constraint raises ConstraintViolation
and the service decides what that means for the caller.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from events.domain import Booking, BookingId, Event, EventId
from events.domain.query import BookingQuery, EventQuery, SortKey

UNIQUE_EVENT_SLUG = "unique_event_slug"
UNIQUE_BOOKING_EVENT_EMAIL = "unique_booking_event_email"
BOOKING_EVENT_REFERENCE = "booking_event_reference"
EVENT_EXISTS = "event_exists"


class ConstraintViolation(Exception):
    """Raised by a store when a write breaks one of its constraints."""

    def __init__(self, constraint: str) -> None:
        super().__init__(f"Constraint violated: {constraint}")
        self.constraint = constraint


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def insert(self, event: Event) -> EventId:
        """Persist a new event.

        Raises:
            ConstraintViolation: If the slug is already taken.
        """
        ...

    @abstractmethod
    def update(self, event: Event) -> None:
        """Overwrite a stored event's fields, keyed by its ID.

        Raises:
            ConstraintViolation: If the new slug is already taken
                (UNIQUE_EVENT_SLUG) or the event is gone (EVENT_EXISTS).
        """
        ...

    @abstractmethod
    def find_one(self, query: EventQuery) -> Event | None:
        """Return the first matching event, or None if none match."""
        ...

    @abstractmethod
    def find(
        self,
        query: EventQuery,
        sort: tuple[SortKey, ...] = (),
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Event]:
        """Return matching events. An empty sort means store-native order."""
        ...

    @abstractmethod
    def count(self, query: EventQuery) -> int:
        """Return the number of matching events."""
        ...


class BookingStore(ABC):
    """Interface for booking persistence operations."""

    @abstractmethod
    def insert(self, booking: Booking) -> BookingId:
        """Persist a new booking.

        Raises:
            ConstraintViolation: If the (event, email) pair already exists,
                or the referenced event is gone.
        """
        ...

    @abstractmethod
    def find_one(self, query: BookingQuery) -> Booking | None:
        """Return the first matching booking, or None if none match."""
        ...

    @abstractmethod
    def count(self, query: BookingQuery) -> int:
        """Return the number of matching bookings."""
        ...


@dataclass(frozen=True)
class Stores:
    """Store handle bundle, bound to one backing database."""

    events: EventStore
    bookings: BookingStore
