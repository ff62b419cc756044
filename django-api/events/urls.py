from django.urls import path

from events.handlers import (
    BookingListView,
    EventBookingCountView,
    EventDetailView,
    EventListView,
    SimilarEventListView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:slug>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:slug>/similar",
        SimilarEventListView.as_view(),
        name="event-similar",
    ),
    path(
        "events/<str:slug>/bookings",
        EventBookingCountView.as_view(),
        name="event-booking-count",
    ),
    path("bookings", BookingListView.as_view(), name="booking-list"),
]
