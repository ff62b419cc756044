"""Pytest configuration and shared fixtures."""

import pytest
from fakes import InMemoryBookingStore, InMemoryEventStore, StepClock
from rest_framework.test import APIClient

from events.services.booking_service import BookingService
from events.services.event_service import EventService


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def event_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def booking_store(event_store) -> InMemoryBookingStore:
    return InMemoryBookingStore(event_store)


@pytest.fixture
def event_service(event_store, clock) -> EventService:
    return EventService(event_store, clock=clock)


@pytest.fixture
def booking_service(booking_store, event_store, clock) -> BookingService:
    return BookingService(booking_store, event_store, clock=clock)
