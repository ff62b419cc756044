"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Writes run as an explicit pipeline: validate -> derive slug -> persist.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime

from django.utils import timezone

from events.domain.errors import EventNotFoundError, InvalidSlugError, SlugConflictError
from events.domain.models import Event
from events.domain.query import (
    DEFAULT_LIMIT,
    SIMILAR_EVENTS_LIMIT,
    EventFilters,
    EventQuery,
    Page,
    paginate,
    plan,
)
from events.domain.slugs import derive_slug, is_valid_slug
from events.domain.validation import validate_event
from events.domain.value_objects import EventId
from events.stores.interfaces import EVENT_EXISTS, ConstraintViolation, EventStore

logger = logging.getLogger(__name__)


class EventService:
    """Service for event catalog operations."""

    def __init__(
        self,
        store: EventStore,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._clock = clock

    def create_event(self, payload: Mapping[str, object]) -> Event:
        """Validate a payload and persist it as a new event.

        Raises:
            ValidationError: If any field is malformed or missing.
            SlugConflictError: If another event already uses the derived slug.
        """
        draft = validate_event(payload)
        slug = derive_slug(draft.title)
        self._ensure_slug_free(slug)

        event = Event.from_draft(draft, id=EventId.new(), slug=slug, now=self._clock())
        try:
            self._store.insert(event)
        except ConstraintViolation as exc:
            raise SlugConflictError(slug) from exc

        logger.info("Created event %s (%s)", event.slug, event.id)
        return event

    def update_event(self, slug: str, changes: Mapping[str, object]) -> Event:
        """Apply a partial update to an event.

        The slug is re-derived only when the title actually changes.

        Raises:
            InvalidSlugError: If the slug is malformed.
            EventNotFoundError: If the event does not exist, or is removed
                before the update lands.
            ValidationError: If the merged fields are invalid.
            SlugConflictError: If the new title's slug is taken.
        """
        current = self.get_event(slug)
        draft = validate_event(changes, base=current.to_draft())

        new_slug = current.slug
        if draft.title != current.title:
            new_slug = derive_slug(draft.title)
            if new_slug != current.slug:
                self._ensure_slug_free(new_slug, owner=current.id)

        event = current.revise(draft, slug=new_slug, now=self._clock())
        try:
            self._store.update(event)
        except ConstraintViolation as exc:
            if exc.constraint == EVENT_EXISTS:
                raise EventNotFoundError(slug) from exc
            raise SlugConflictError(new_slug) from exc

        if new_slug != current.slug:
            logger.info("Event %s renamed, slug %s -> %s", event.id, current.slug, new_slug)
        return event

    def list_events(
        self,
        filters: EventFilters,
        page: object = None,
        limit: object = None,
        *,
        default_limit: int = DEFAULT_LIMIT,
    ) -> Page[Event]:
        """Return one page of events matching the filters, soonest first."""
        query_plan = plan(filters, page, limit, default_limit=default_limit)
        events = self._store.find(
            query_plan.predicate,
            sort=query_plan.sort,
            skip=query_plan.skip,
            limit=query_plan.limit,
        )
        total = self._store.count(query_plan.predicate)
        return paginate(events, total, query_plan)

    def get_event(self, slug: str) -> Event:
        """Return an event by slug.

        Raises:
            InvalidSlugError: If the slug is not in URL-safe form.
            EventNotFoundError: If the event does not exist.
        """
        if not is_valid_slug(slug):
            raise InvalidSlugError()
        event = self._store.find_one(EventQuery(slug=slug))
        if event is None:
            raise EventNotFoundError(slug)
        return event

    def get_similar_events(
        self, slug: str, max_results: int = SIMILAR_EVENTS_LIMIT
    ) -> list[Event]:
        """Return events sharing a tag with the given one, excluding itself.

        An unknown or malformed slug yields an empty list.
        """
        if not is_valid_slug(slug):
            return []
        source = self._store.find_one(EventQuery(slug=slug))
        if source is None:
            return []
        return self._store.find(
            EventQuery(tags=source.tags, exclude_id=source.id),
            limit=max_results,
        )

    def _ensure_slug_free(self, slug: str, owner: EventId | None = None) -> None:
        holder = self._store.find_one(EventQuery(slug=slug))
        if holder is not None and holder.id != owner:
            logger.warning("Slug %s already taken by event %s", slug, holder.id)
            raise SlugConflictError(slug)
