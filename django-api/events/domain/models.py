"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in events/models.py (persistence layer).
"""

from dataclasses import dataclass, fields, replace
from datetime import date, datetime

from events.domain.value_objects import BookingId, EventId, EventMode


@dataclass(frozen=True)
class EventDraft:
    """Validated, normalized event fields not yet bound to an identity."""

    title: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: date
    time: str
    mode: EventMode
    audience: str
    organizer: str
    agenda: tuple[str, ...]
    tags: tuple[str, ...]


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    slug: str
    title: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: date
    time: str
    mode: EventMode
    audience: str
    organizer: str
    agenda: tuple[str, ...]
    tags: tuple[str, ...]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_draft(
        cls, draft: EventDraft, *, id: EventId, slug: str, now: datetime
    ) -> "Event":
        return cls(
            id=id,
            slug=slug,
            created_at=now,
            updated_at=now,
            **_draft_fields(draft),
        )

    def revise(self, draft: EventDraft, *, slug: str, now: datetime) -> "Event":
        """Return a copy carrying the draft's fields; identity and created_at are kept."""
        return replace(self, slug=slug, updated_at=now, **_draft_fields(draft))

    def to_draft(self) -> EventDraft:
        return EventDraft(**_draft_fields(self))

    def shares_tags_with(self, tags: tuple[str, ...]) -> bool:
        return not set(self.tags).isdisjoint(tags)


@dataclass(frozen=True)
class BookingDraft:
    """Validated booking request: a target event and a normalized email."""

    event_id: EventId
    email: str


@dataclass(frozen=True)
class Booking:
    """Domain representation of a Booking."""

    id: BookingId
    event_id: EventId
    email: str
    created_at: datetime
    updated_at: datetime


_DRAFT_FIELDS = tuple(field.name for field in fields(EventDraft))


def _draft_fields(draft: EventDraft) -> dict:
    return {name: getattr(draft, name) for name in _DRAFT_FIELDS}
