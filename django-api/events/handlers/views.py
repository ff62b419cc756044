"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Never contain business logic
- Never expose internal error details

Domain errors raised by services are turned into responses by
events.handlers.exceptions.domain_exception_handler.
"""

from collections.abc import Mapping

from django.conf import settings
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from events.domain.errors import FieldViolation, ValidationError
from events.domain.query import EventFilters
from events.handlers.serializers import (
    BookingSerializer,
    EventSerializer,
    PaginationSerializer,
)
from events.services.booking_service import BookingService
from events.services.event_service import EventService
from events.stores.django_store import open_stores

LIST_FIELDS = ("agenda", "tags")


def _payload(data) -> dict:
    """Flatten request data into the plain mapping the validators expect."""
    if hasattr(data, "getlist"):
        payload = {key: data.get(key) for key in data.keys()}
        for key in LIST_FIELDS:
            if key in data:
                payload[key] = [
                    item for value in data.getlist(key) for item in value.split(",")
                ]
        return payload
    if not isinstance(data, Mapping):
        raise ValidationError([FieldViolation("body", "Request body must be an object")])
    return dict(data)


class EventListView(APIView):
    """Handler for GET/POST /api/events"""

    def get(self, request: Request) -> Response:
        params = request.query_params
        with open_stores() as stores:
            page = EventService(stores.events).list_events(
                EventFilters.from_params(params),
                params.get("page"),
                params.get("limit"),
                default_limit=settings.EVENTS_PAGE_SIZE,
            )
        return Response(
            {
                "events": EventSerializer(page.items, many=True).data,
                "pagination": PaginationSerializer(page).data,
            }
        )

    def post(self, request: Request) -> Response:
        payload = _payload(request.data)
        with open_stores() as stores:
            event = EventService(stores.events).create_event(payload)
        return Response(
            {"event": EventSerializer(event).data}, status=status.HTTP_201_CREATED
        )


class EventDetailView(APIView):
    """Handler for GET/PATCH /api/events/{slug}"""

    def get(self, request: Request, slug: str) -> Response:
        with open_stores() as stores:
            event = EventService(stores.events).get_event(slug)
        return Response({"event": EventSerializer(event).data})

    def patch(self, request: Request, slug: str) -> Response:
        payload = _payload(request.data)
        with open_stores() as stores:
            event = EventService(stores.events).update_event(slug, payload)
        return Response({"event": EventSerializer(event).data})


class SimilarEventListView(APIView):
    """Handler for GET /api/events/{slug}/similar"""

    def get(self, request: Request, slug: str) -> Response:
        with open_stores() as stores:
            events = EventService(stores.events).get_similar_events(
                slug, max_results=settings.EVENTS_SIMILAR_LIMIT
            )
        return Response({"events": EventSerializer(events, many=True).data})


class EventBookingCountView(APIView):
    """Handler for GET /api/events/{slug}/bookings"""

    def get(self, request: Request, slug: str) -> Response:
        with open_stores() as stores:
            count = BookingService(stores.bookings, stores.events).count_bookings(slug)
        return Response({"slug": slug, "count": count})


class BookingListView(APIView):
    """Handler for POST /api/bookings"""

    def post(self, request: Request) -> Response:
        payload = _payload(request.data)
        with open_stores() as stores:
            booking = BookingService(stores.bookings, stores.events).create_booking(payload)
        return Response(
            {"booking": BookingSerializer(booking).data}, status=status.HTTP_201_CREATED
        )
