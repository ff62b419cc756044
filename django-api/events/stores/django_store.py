"""Django ORM implementation of the event and booking stores.

Each write runs in its own ``transaction.atomic`` block (a savepoint when the
caller already holds a transaction), so an IntegrityError leaves the
connection usable and can be reported as a ConstraintViolation.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import Any, TypeVar

from django.db import (
    DEFAULT_DB_ALIAS,
    IntegrityError,
    InterfaceError,
    OperationalError,
    connections,
    transaction,
)
from django.db.models import Exists, OuterRef, Q, QuerySet

from events import models as db
from events.domain import Booking, BookingId, Event, EventId, EventMode
from events.domain.errors import StoreUnavailableError
from events.domain.query import SEARCH_FIELDS, BookingQuery, EventQuery, SortKey
from events.stores.interfaces import (
    BOOKING_EVENT_REFERENCE,
    EVENT_EXISTS,
    UNIQUE_BOOKING_EVENT_EMAIL,
    UNIQUE_EVENT_SLUG,
    BookingStore,
    ConstraintViolation,
    EventStore,
    Stores,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def translate_outages(func: Callable[..., T]) -> Callable[..., T]:
    """Surface connectivity failures as StoreUnavailableError, without retrying."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as exc:
            logger.error("Store call %s failed: %s", func.__name__, exc)
            raise StoreUnavailableError() from exc

    return wrapper


@contextmanager
def open_stores(using: str = DEFAULT_DB_ALIAS) -> Iterator[Stores]:
    """Acquire a store handle bound to one database alias.

    The connection is checked up front so an unreachable database fails
    before any work starts. Django returns the connection at request end.
    """
    try:
        connections[using].ensure_connection()
    except (OperationalError, InterfaceError) as exc:
        logger.error("Database %r unreachable: %s", using, exc)
        raise StoreUnavailableError() from exc
    yield Stores(events=DjangoEventStore(using), bookings=DjangoBookingStore(using))


class DjangoEventStore(EventStore):
    """Relational event store using Django ORM."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        self._using = using

    @translate_outages
    def insert(self, event: Event) -> EventId:
        try:
            with transaction.atomic(using=self._using):
                row = db.Event.objects.using(self._using).create(
                    id=event.id.value,
                    created_at=event.created_at,
                    **_event_columns(event),
                )
                self._write_tags(row.pk, event.tags)
        except IntegrityError as exc:
            logger.warning("Slug %r rejected by database constraint", event.slug)
            raise ConstraintViolation(UNIQUE_EVENT_SLUG) from exc
        return event.id

    @translate_outages
    def update(self, event: Event) -> None:
        try:
            with transaction.atomic(using=self._using):
                updated = db.Event.objects.using(self._using).filter(
                    pk=event.id.value
                ).update(**_event_columns(event))
                if not updated:
                    logger.warning("Event %s no longer exists, update dropped", event.id)
                    raise ConstraintViolation(EVENT_EXISTS)
                db.EventTag.objects.using(self._using).filter(
                    event_id=event.id.value
                ).delete()
                self._write_tags(event.id.value, event.tags)
        except IntegrityError as exc:
            logger.warning("Slug %r rejected by database constraint", event.slug)
            raise ConstraintViolation(UNIQUE_EVENT_SLUG) from exc

    @translate_outages
    def find_one(self, query: EventQuery) -> Event | None:
        row = self._queryset(query).first()
        return _to_event(row) if row is not None else None

    @translate_outages
    def find(
        self,
        query: EventQuery,
        sort: tuple[SortKey, ...] = (),
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Event]:
        rows = self._queryset(query)
        if sort:
            rows = rows.order_by(*(_order_term(key) for key in sort))
        stop = skip + limit if limit is not None else None
        return [_to_event(row) for row in rows[skip:stop]]

    @translate_outages
    def count(self, query: EventQuery) -> int:
        return self._queryset(query).count()

    def _queryset(self, query: EventQuery) -> QuerySet:
        rows = (
            db.Event.objects.using(self._using)
            .filter(_event_condition(query))
            .prefetch_related("tag_links")
        )
        if query.tags:
            rows = rows.filter(
                Exists(
                    db.EventTag.objects.using(self._using).filter(
                        event=OuterRef("pk"), name__in=query.tags
                    )
                )
            )
        return rows

    def _write_tags(self, event_pk, tags: tuple[str, ...]) -> None:
        db.EventTag.objects.using(self._using).bulk_create(
            db.EventTag(event_id=event_pk, name=name, position=position)
            for position, name in enumerate(tags)
        )


class DjangoBookingStore(BookingStore):
    """Relational booking store using Django ORM."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        self._using = using

    @translate_outages
    def insert(self, booking: Booking) -> BookingId:
        try:
            with transaction.atomic(using=self._using):
                db.Booking.objects.using(self._using).create(
                    id=booking.id.value,
                    event_id=booking.event_id.value,
                    email=booking.email,
                    created_at=booking.created_at,
                    updated_at=booking.updated_at,
                )
        except IntegrityError as exc:
            constraint = self._violated_constraint(booking)
            logger.warning(
                "Booking for event %s rejected by database constraint %s",
                booking.event_id,
                constraint,
            )
            raise ConstraintViolation(constraint) from exc
        return booking.id

    @translate_outages
    def find_one(self, query: BookingQuery) -> Booking | None:
        row = self._queryset(query).first()
        return _to_booking(row) if row is not None else None

    @translate_outages
    def count(self, query: BookingQuery) -> int:
        return self._queryset(query).count()

    def _queryset(self, query: BookingQuery) -> QuerySet:
        condition = Q()
        if query.event_id is not None:
            condition &= Q(event_id=query.event_id.value)
        if query.email is not None:
            condition &= Q(email=query.email)
        return db.Booking.objects.using(self._using).filter(condition)

    def _violated_constraint(self, booking: Booking) -> str:
        event_exists = (
            db.Event.objects.using(self._using).filter(pk=booking.event_id.value).exists()
        )
        return UNIQUE_BOOKING_EVENT_EMAIL if event_exists else BOOKING_EVENT_REFERENCE


def _event_condition(query: EventQuery) -> Q:
    condition = Q()
    if query.id is not None:
        condition &= Q(pk=query.id.value)
    if query.slug is not None:
        condition &= Q(slug=query.slug)
    if query.exclude_id is not None:
        condition &= ~Q(pk=query.exclude_id.value)
    if query.mode is not None:
        condition &= Q(mode=query.mode.value)
    if query.search:
        matches_text = Q()
        for field in SEARCH_FIELDS:
            matches_text |= Q(**{f"{field}__icontains": query.search})
        condition &= matches_text
    return condition


def _order_term(key: SortKey) -> str:
    return f"-{key.field}" if key.descending else key.field


def _event_columns(event: Event) -> dict[str, Any]:
    return {
        "title": event.title,
        "slug": event.slug,
        "description": event.description,
        "overview": event.overview,
        "image": event.image,
        "venue": event.venue,
        "location": event.location,
        "date": event.date,
        "time": event.time,
        "mode": event.mode.value,
        "audience": event.audience,
        "organizer": event.organizer,
        "agenda": list(event.agenda),
        "updated_at": event.updated_at,
    }


def _to_event(row: db.Event) -> Event:
    return Event(
        id=EventId(row.id),
        slug=row.slug,
        title=row.title,
        description=row.description,
        overview=row.overview,
        image=row.image,
        venue=row.venue,
        location=row.location,
        date=row.date,
        time=row.time,
        mode=EventMode(row.mode),
        audience=row.audience,
        organizer=row.organizer,
        agenda=tuple(row.agenda),
        tags=tuple(tag.name for tag in row.tag_links.all()),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_booking(row: db.Booking) -> Booking:
    return Booking(
        id=BookingId(row.id),
        event_id=EventId(row.event_id),
        email=row.email,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
