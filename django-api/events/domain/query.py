"""Store-agnostic query predicates, sort order and pagination.

Predicates carry a pure ``matches`` method so any store can evaluate them;
the ORM store translates the same fields into database filters.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Generic, Self, TypeVar

from events.domain.models import Booking, Event
from events.domain.value_objects import EventId, EventMode

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Largest row offset the database backends accept.
MAX_OFFSET = 2**63 - 1
SIMILAR_EVENTS_LIMIT = 6

SEARCH_FIELDS = ("title", "description", "location", "organizer")

T = TypeVar("T")


@dataclass(frozen=True)
class SortKey:
    field: str
    descending: bool = False


# Soonest events first; among same-day events, newest-added first.
EVENT_SORT = (SortKey("date"), SortKey("created_at", descending=True))


@dataclass(frozen=True)
class EventQuery:
    """Conjunction of event conditions. Unset fields do not constrain."""

    id: EventId | None = None
    slug: str | None = None
    search: str | None = None
    mode: EventMode | None = None
    tags: tuple[str, ...] = ()
    exclude_id: EventId | None = None

    def matches(self, event: Event) -> bool:
        if self.id is not None and event.id != self.id:
            return False
        if self.slug is not None and event.slug != self.slug:
            return False
        if self.exclude_id is not None and event.id == self.exclude_id:
            return False
        if self.mode is not None and event.mode != self.mode:
            return False
        if self.tags and not event.shares_tags_with(self.tags):
            return False
        if self.search:
            needle = self.search.lower()
            if not any(needle in getattr(event, f).lower() for f in SEARCH_FIELDS):
                return False
        return True


@dataclass(frozen=True)
class BookingQuery:
    event_id: EventId | None = None
    email: str | None = None

    def matches(self, booking: Booking) -> bool:
        if self.event_id is not None and booking.event_id != self.event_id:
            return False
        if self.email is not None and booking.email != self.email:
            return False
        return True


@dataclass(frozen=True)
class EventFilters:
    """Raw list filters as a caller supplied them."""

    search: str | None = None
    mode: str | None = None
    tags: str | Sequence[str] | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, object]) -> Self:
        """Read filters from query parameters; repeated ``tags`` keys are merged."""
        tags = params.getlist("tags") if hasattr(params, "getlist") else params.get("tags")
        return cls(
            search=params.get("search"),
            mode=params.get("mode"),
            tags=tags or None,
        )


@dataclass(frozen=True)
class QueryPlan:
    predicate: EventQuery
    sort: tuple[SortKey, ...]
    skip: int
    limit: int
    page: int


@dataclass(frozen=True)
class Page(Generic[T]):
    items: tuple[T, ...]
    current_page: int
    total_pages: int
    total_count: int
    has_next_page: bool
    has_prev_page: bool
    limit: int


def parse_positive_int(raw: object, default: int, maximum: int | None = None) -> int:
    """Parse a page or limit value, falling back to ``default`` when unusable.

    Values below 1 or above ``maximum`` count as unusable.
    """
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str):
        try:
            value = int(raw.strip())
        except ValueError:
            return default
    else:
        return default
    if value < 1 or (maximum is not None and value > maximum):
        return default
    return value


def split_tags(raw: str | Sequence[str] | None) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        raw = [raw]
    items = (part for item in raw if isinstance(item, str) for part in item.split(","))
    return tuple(dict.fromkeys(t.strip() for t in items if t.strip()))


def build_predicate(filters: EventFilters) -> EventQuery:
    """Translate raw filters into a predicate, dropping unusable ones."""
    search = filters.search.strip() if isinstance(filters.search, str) else None
    return EventQuery(
        search=search or None,
        mode=EventMode.parse(filters.mode),
        tags=split_tags(filters.tags),
    )


def plan(
    filters: EventFilters,
    page: object = None,
    limit: object = None,
    *,
    default_limit: int = DEFAULT_LIMIT,
) -> QueryPlan:
    page_size = parse_positive_int(limit, default_limit, MAX_LIMIT)
    # The last row of the page must still be addressable.
    last_page = (MAX_OFFSET - page_size) // page_size + 1
    page_number = parse_positive_int(page, DEFAULT_PAGE, last_page)
    return QueryPlan(
        predicate=build_predicate(filters),
        sort=EVENT_SORT,
        skip=(page_number - 1) * page_size,
        limit=page_size,
        page=page_number,
    )


def paginate(items: Sequence[T], total_count: int, query_plan: QueryPlan) -> Page[T]:
    total_pages = math.ceil(total_count / query_plan.limit)
    return Page(
        items=tuple(items),
        current_page=query_plan.page,
        total_pages=total_pages,
        total_count=total_count,
        has_next_page=query_plan.page < total_pages,
        has_prev_page=query_plan.page > 1,
        limit=query_plan.limit,
    )
