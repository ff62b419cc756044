"""Booking service: validate, authorize, then persist a reservation."""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime

from django.utils import timezone

from events.domain.errors import (
    DuplicateBookingError,
    EventNotFoundError,
    InvalidSlugError,
    ReferenceNotFoundError,
)
from events.domain.models import Booking
from events.domain.query import BookingQuery, EventQuery
from events.domain.slugs import is_valid_slug
from events.domain.validation import validate_booking
from events.domain.value_objects import BookingId
from events.services.integrity import BookingGuard
from events.stores.interfaces import (
    UNIQUE_BOOKING_EVENT_EMAIL,
    BookingStore,
    ConstraintViolation,
    EventStore,
)

logger = logging.getLogger(__name__)


class BookingService:
    """Service for attendee bookings."""

    def __init__(
        self,
        bookings: BookingStore,
        events: EventStore,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._bookings = bookings
        self._events = events
        self._guard = BookingGuard(events, bookings)
        self._clock = clock

    def create_booking(self, payload: Mapping[str, object]) -> Booking:
        """Book an email onto an event.

        Raises:
            ValidationError: If the event ID or email is malformed.
            ReferenceNotFoundError: If the event does not exist.
            DuplicateBookingError: If the email already booked the event,
                including when a concurrent request won the race.
        """
        draft = validate_booking(payload)
        try:
            self._guard.authorize(draft)
        except (ReferenceNotFoundError, DuplicateBookingError) as exc:
            logger.warning("Booking for event %s refused: %s", draft.event_id, exc.code.value)
            raise

        now = self._clock()
        booking = Booking(
            id=BookingId.new(),
            event_id=draft.event_id,
            email=draft.email,
            created_at=now,
            updated_at=now,
        )
        try:
            self._bookings.insert(booking)
        except ConstraintViolation as exc:
            if exc.constraint == UNIQUE_BOOKING_EVENT_EMAIL:
                raise DuplicateBookingError(str(draft.event_id), draft.email) from exc
            raise ReferenceNotFoundError(str(draft.event_id)) from exc

        logger.info("Booked event %s (booking %s)", booking.event_id, booking.id)
        return booking

    def count_bookings(self, slug: str) -> int:
        """Return how many bookings an event has.

        Raises:
            InvalidSlugError: If the slug is not in URL-safe form.
            EventNotFoundError: If the event does not exist.
        """
        if not is_valid_slug(slug):
            raise InvalidSlugError()
        event = self._events.find_one(EventQuery(slug=slug))
        if event is None:
            raise EventNotFoundError(slug)
        return self._bookings.count(BookingQuery(event_id=event.id))
