"""Field rules for Event and Booking payloads.

Both validators collect every violation before raising, and only build the
normalized draft once the whole payload is clean.
"""

import re
from collections.abc import Mapping
from datetime import date

from events.domain.errors import FieldViolation, ValidationError
from events.domain.models import BookingDraft, EventDraft
from events.domain.slugs import derive_slug
from events.domain.value_objects import EventId, EventMode

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
TIME_PATTERN = re.compile(r"(0?[1-9]|1[0-2]):([0-5][0-9])\s?(AM|PM)", re.IGNORECASE)
EMAIL_PATTERN = re.compile(
    r"[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*"
)
MAX_EMAIL_LENGTH = 254
MAX_TAG_LENGTH = 100

# field -> (label, max length)
TEXT_FIELDS: dict[str, tuple[str, int]] = {
    "title": ("Title", 200),
    "description": ("Description", 2000),
    "overview": ("Overview", 500),
    "image": ("Image", 500),
    "venue": ("Venue", 255),
    "location": ("Location", 255),
    "audience": ("Audience", 255),
    "organizer": ("Organizer", 255),
}


class _Violations:
    def __init__(self) -> None:
        self.items: list[FieldViolation] = []

    def add(self, field: str, reason: str) -> None:
        self.items.append(FieldViolation(field=field, reason=reason))

    def raise_if_any(self) -> None:
        if self.items:
            raise ValidationError(self.items)


def validate_event(
    payload: Mapping[str, object], *, base: EventDraft | None = None
) -> EventDraft:
    """Validate and normalize an event payload.

    When ``base`` is given the payload is a partial update: fields it omits
    are taken from ``base`` and the merged result is validated as a whole.

    Raises:
        ValidationError: listing every rejected field.
    """
    data = dict(draft_to_payload(base)) if base is not None else {}
    data.update(payload)

    violations = _Violations()
    texts: dict[str, str] = {}
    for field, (label, max_length) in TEXT_FIELDS.items():
        value = _clean_text(data.get(field), field, label, max_length, violations)
        if value is not None:
            texts[field] = value

    if "title" in texts and not derive_slug(texts["title"]):
        violations.add("title", "Title must contain at least one letter or number")

    event_date = _clean_date(data.get("date"), violations)
    event_time = _clean_time(data.get("time"), violations)
    mode = _clean_mode(data.get("mode"), violations)
    agenda = _clean_list(data.get("agenda"), "agenda", "Agenda", violations)
    tags = _clean_list(
        data.get("tags"), "tags", "Tags", violations, max_item_length=MAX_TAG_LENGTH
    )

    violations.raise_if_any()
    return EventDraft(
        date=event_date,
        time=event_time,
        mode=mode,
        agenda=agenda,
        tags=tuple(dict.fromkeys(tags)),
        **texts,
    )


def validate_booking(payload: Mapping[str, object]) -> BookingDraft:
    """Validate a booking request and normalize its email.

    Raises:
        ValidationError: listing every rejected field.
    """
    violations = _Violations()

    raw_event_id = payload.get("eventId", payload.get("event_id"))
    event_id = None
    if raw_event_id is None or raw_event_id == "":
        violations.add("eventId", "Event ID is required")
    else:
        try:
            event_id = EventId.from_string(str(raw_event_id))
        except ValueError:
            violations.add("eventId", "Event ID is not a valid identifier")

    email = _clean_email(payload.get("email"), violations)

    violations.raise_if_any()
    return BookingDraft(event_id=event_id, email=email)


def draft_to_payload(draft: EventDraft) -> dict[str, object]:
    """Render a draft back into the raw payload shape the validator accepts."""
    return {
        "title": draft.title,
        "description": draft.description,
        "overview": draft.overview,
        "image": draft.image,
        "venue": draft.venue,
        "location": draft.location,
        "date": draft.date.isoformat(),
        "time": draft.time,
        "mode": draft.mode.value,
        "audience": draft.audience,
        "organizer": draft.organizer,
        "agenda": list(draft.agenda),
        "tags": list(draft.tags),
    }


def _clean_text(value, field, label, max_length, violations):
    if value is None:
        violations.add(field, f"{label} is required")
        return None
    if not isinstance(value, str):
        violations.add(field, f"{label} must be a string")
        return None
    value = value.strip()
    if not value:
        violations.add(field, f"{label} is required")
        return None
    if len(value) > max_length:
        violations.add(field, f"{label} cannot exceed {max_length} characters")
        return None
    return value


def _clean_date(value, violations) -> date | None:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        violations.add("date", "Date is required")
        return None
    value = value.strip()
    if not DATE_PATTERN.fullmatch(value):
        violations.add("date", "Date must be in ISO format (YYYY-MM-DD)")
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        violations.add("date", "Date is not a valid calendar date")
        return None


def _clean_time(value, violations) -> str | None:
    if not isinstance(value, str) or not value.strip():
        violations.add("time", "Time is required")
        return None
    match = TIME_PATTERN.fullmatch(value.strip())
    if match is None:
        violations.add("time", "Time must be in format HH:MM AM/PM")
        return None
    hours, minutes, meridiem = match.groups()
    return f"{int(hours):02d}:{minutes} {meridiem.upper()}"


def _clean_mode(value, violations) -> EventMode | None:
    if value is None or value == "":
        violations.add("mode", "Mode is required")
        return None
    mode = EventMode.parse(value)
    if mode is None:
        violations.add("mode", "Mode must be either online, offline, or hybrid")
    return mode


def _clean_list(
    value, field, label, violations, *, max_item_length: int | None = None
) -> tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    if value is None:
        violations.add(field, f"{label} is required")
        return ()
    if not isinstance(value, (list, tuple)) or not all(
        isinstance(item, str) for item in value
    ):
        violations.add(field, f"{label} must be a list of strings")
        return ()
    items = tuple(item.strip() for item in value if item.strip())
    if not items:
        violations.add(field, f"{label} must contain at least one item")
    elif max_item_length is not None and any(len(item) > max_item_length for item in items):
        violations.add(field, f"{label} cannot exceed {max_item_length} characters each")
    return items


def _clean_email(value, violations) -> str | None:
    if not isinstance(value, str) or not value.strip():
        violations.add("email", "Email is required")
        return None
    value = value.strip()
    if len(value) > MAX_EMAIL_LENGTH or not EMAIL_PATTERN.fullmatch(value):
        violations.add("email", "Please provide a valid email address")
        return None
    return value.lower()
