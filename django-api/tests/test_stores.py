"""Integration tests for the Django ORM stores.

Run with: pytest tests/test_stores.py -v
"""

import dataclasses
from unittest import mock

import pytest
from django.db import OperationalError, connections
from django.db.models import ProtectedError
from fakes import StepClock, event_payload

from events import models as db
from events.domain import Booking, BookingId
from events.domain.errors import StoreUnavailableError
from events.domain.query import EVENT_SORT, BookingQuery, EventQuery
from events.domain.validation import MAX_TAG_LENGTH, TEXT_FIELDS
from events.domain.value_objects import EventId
from events.services.event_service import EventService
from events.stores.django_store import (
    DjangoBookingStore,
    DjangoEventStore,
    open_stores,
    translate_outages,
)
from events.stores.interfaces import (
    BOOKING_EVENT_REFERENCE,
    EVENT_EXISTS,
    UNIQUE_BOOKING_EVENT_EMAIL,
    UNIQUE_EVENT_SLUG,
    ConstraintViolation,
)


@pytest.fixture
def store() -> DjangoEventStore:
    return DjangoEventStore()


@pytest.fixture
def service(store) -> EventService:
    return EventService(store, clock=StepClock())


def _booking(event_id: EventId, email: str, clock: StepClock) -> Booking:
    now = clock()
    return Booking(
        id=BookingId.new(),
        event_id=event_id,
        email=email,
        created_at=now,
        updated_at=now,
    )


@pytest.mark.django_db
class TestDjangoEventStore:
    """Tests for DjangoEventStore."""

    def test_round_trip_preserves_event(self, service, store):
        created = service.create_event(event_payload(tags=["web", "ai", "africa"]))
        loaded = store.find_one(EventQuery(slug=created.slug))
        assert loaded == created
        assert loaded.tags == ("web", "ai", "africa")

    def test_duplicate_slug_hits_constraint(self, service, store):
        created = service.create_event(event_payload())
        clone = dataclasses.replace(created, id=EventId.new())
        with pytest.raises(ConstraintViolation) as exc_info:
            store.insert(clone)
        assert exc_info.value.constraint == UNIQUE_EVENT_SLUG
        assert store.count(EventQuery()) == 1

    def test_update_replaces_fields_and_tags(self, service, store):
        created = service.create_event(event_payload())
        service.update_event(created.slug, {"title": "Renamed", "tags": ["new"]})

        loaded = store.find_one(EventQuery(id=created.id))
        assert loaded.slug == "renamed"
        assert loaded.tags == ("new",)
        assert db.EventTag.objects.count() == 1

    def test_update_onto_taken_slug_hits_constraint(self, service, store):
        service.create_event(event_payload(title="Taken"))
        other = service.create_event(event_payload(title="Other"))
        with pytest.raises(ConstraintViolation):
            store.update(dataclasses.replace(other, slug="taken"))
        assert store.find_one(EventQuery(id=other.id)).slug == "other"

    def test_update_of_deleted_event_hits_constraint(self, service, store):
        created = service.create_event(event_payload())
        db.Event.objects.filter(pk=created.id.value).delete()

        with pytest.raises(ConstraintViolation) as exc_info:
            store.update(dataclasses.replace(created, tags=("ai",)))
        assert exc_info.value.constraint == EVENT_EXISTS
        assert db.EventTag.objects.count() == 0

    def test_find_sorts_and_pages(self, service, store):
        later = service.create_event(event_payload(title="Later", date="2025-12-01"))
        first = service.create_event(event_payload(title="First", date="2025-06-01"))
        second = service.create_event(event_payload(title="Second", date="2025-06-01"))

        rows = store.find(EventQuery(), sort=EVENT_SORT)
        assert [e.id for e in rows] == [second.id, first.id, later.id]
        assert [e.id for e in store.find(EventQuery(), sort=EVENT_SORT, skip=1, limit=1)] == [
            first.id
        ]

    def test_search_and_tag_filters(self, service, store):
        service.create_event(event_payload(title="PyCon", organizer="Python Africa", tags=["py"]))
        service.create_event(event_payload(title="RustConf", tags=["rust", "systems"]))
        service.create_event(event_payload(title="JSConf", tags=["js"]))

        assert [e.title for e in store.find(EventQuery(search="python"))] == ["PyCon"]
        tagged = store.find(EventQuery(tags=("systems", "js")), sort=EVENT_SORT)
        assert {e.title for e in tagged} == {"RustConf", "JSConf"}
        assert store.count(EventQuery(tags=("systems", "js"))) == 2

    def test_similar_excludes_source_and_caps(self, service):
        source = service.create_event(event_payload(title="Source", tags=["ai", "africa"]))
        for n in range(8):
            service.create_event(event_payload(title=f"Related {n}", tags=["africa"]))
        service.create_event(event_payload(title="Unrelated", tags=["web"]))

        similar = service.get_similar_events(source.slug)
        assert len(similar) == 6
        assert all("africa" in e.tags for e in similar)
        assert source.id not in {e.id for e in similar}


@pytest.mark.django_db
class TestDjangoBookingStore:
    """Tests for DjangoBookingStore."""

    def test_insert_and_find(self, service):
        event = service.create_event(event_payload())
        bookings = DjangoBookingStore()
        booking = _booking(event.id, "a@b.io", StepClock())
        bookings.insert(booking)

        assert bookings.find_one(BookingQuery(event_id=event.id, email="a@b.io")) == booking
        assert bookings.count(BookingQuery(event_id=event.id)) == 1

    def test_duplicate_pair_hits_constraint(self, service):
        event = service.create_event(event_payload())
        bookings = DjangoBookingStore()
        clock = StepClock()
        bookings.insert(_booking(event.id, "a@b.io", clock))

        with pytest.raises(ConstraintViolation) as exc_info:
            bookings.insert(_booking(event.id, "a@b.io", clock))
        assert exc_info.value.constraint == UNIQUE_BOOKING_EVENT_EMAIL
        # The savepoint rollback leaves the connection usable.
        assert bookings.count(BookingQuery(event_id=event.id)) == 1

    def test_event_with_bookings_cannot_be_deleted(self, service):
        event = service.create_event(event_payload())
        DjangoBookingStore().insert(_booking(event.id, "a@b.io", StepClock()))
        with pytest.raises(ProtectedError):
            db.Event.objects.get(pk=event.id.value).delete()


@pytest.mark.django_db(transaction=True)
def test_missing_event_reference_hits_constraint():
    bookings = DjangoBookingStore()
    with pytest.raises(ConstraintViolation) as exc_info:
        bookings.insert(_booking(EventId.new(), "a@b.io", StepClock()))
    assert exc_info.value.constraint == BOOKING_EVENT_REFERENCE


@pytest.mark.django_db
def test_open_stores_yields_bound_stores():
    with open_stores() as stores:
        assert isinstance(stores.events, DjangoEventStore)
        assert isinstance(stores.bookings, DjangoBookingStore)
        assert stores.events.count(EventQuery()) == 0


def test_open_stores_reports_unreachable_database():
    refused = OperationalError("connection refused")
    with mock.patch.object(connections["default"], "ensure_connection", side_effect=refused):
        with pytest.raises(StoreUnavailableError):
            with open_stores():
                pass


def test_translate_outages_wraps_operational_errors():
    @translate_outages
    def flaky():
        raise OperationalError("server closed the connection")

    with pytest.raises(StoreUnavailableError) as exc_info:
        flaky()
    assert isinstance(exc_info.value.__cause__, OperationalError)


def test_validation_limits_fit_columns():
    for field, (_, max_length) in TEXT_FIELDS.items():
        assert db.Event._meta.get_field(field).max_length == max_length
    assert db.EventTag._meta.get_field("name").max_length == MAX_TAG_LENGTH
