"""Referential integrity checks run before a booking is written.

These checks are the fast path only. Two concurrent requests can both pass
them, so the store's uniqueness constraint remains the final word and
BookingService translates its ConstraintViolation into the same errors.
"""

from events.domain.errors import DuplicateBookingError, ReferenceNotFoundError
from events.domain.models import BookingDraft, Event
from events.domain.query import BookingQuery, EventQuery
from events.stores.interfaces import BookingStore, EventStore


class BookingGuard:
    """Authorizes a booking draft against the current store contents."""

    def __init__(self, events: EventStore, bookings: BookingStore) -> None:
        self._events = events
        self._bookings = bookings

    def authorize(self, draft: BookingDraft) -> Event:
        """Return the referenced event if the booking may be written.

        Raises:
            ReferenceNotFoundError: If the event does not exist.
            DuplicateBookingError: If the email already booked the event.
        """
        event = self._events.find_one(EventQuery(id=draft.event_id))
        if event is None:
            raise ReferenceNotFoundError(str(draft.event_id))

        existing = self._bookings.find_one(
            BookingQuery(event_id=draft.event_id, email=draft.email)
        )
        if existing is not None:
            raise DuplicateBookingError(str(draft.event_id), draft.email)
        return event
