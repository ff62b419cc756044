from events.domain.models import Booking, BookingDraft, Event, EventDraft
from events.domain.value_objects import BookingId, EventId, EventMode

__all__ = [
    "Event",
    "EventDraft",
    "Booking",
    "BookingDraft",
    "EventId",
    "BookingId",
    "EventMode",
]
