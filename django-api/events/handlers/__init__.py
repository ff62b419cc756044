from events.handlers.views import (
    BookingListView,
    EventBookingCountView,
    EventDetailView,
    EventListView,
    SimilarEventListView,
)

__all__ = [
    "EventListView",
    "EventDetailView",
    "SimilarEventListView",
    "EventBookingCountView",
    "BookingListView",
]
