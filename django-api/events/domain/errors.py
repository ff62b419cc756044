"""Domain error codes for the events module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_SLUG = "INVALID_SLUG"
    SLUG_CONFLICT = "SLUG_CONFLICT"
    REFERENCE_NOT_FOUND = "REFERENCE_NOT_FOUND"
    DUPLICATE_BOOKING = "DUPLICATE_BOOKING"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def as_dict(self) -> dict:
        return {"code": self.code.value, "message": self.message}


@dataclass(frozen=True)
class FieldViolation:
    """A single rejected field and the reason it was rejected."""

    field: str
    reason: str


class ValidationError(DomainError):
    """Raised when a payload breaks one or more field rules."""

    def __init__(self, violations: list[FieldViolation] | tuple[FieldViolation, ...]) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_FAILED,
            message="Validation failed",
        )
        self.violations = tuple(violations)

    @property
    def fields(self) -> set[str]:
        return {violation.field for violation in self.violations}

    def as_dict(self) -> dict:
        payload = super().as_dict()
        payload["violations"] = [
            {"field": v.field, "reason": v.reason} for v in self.violations
        ]
        return payload


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, slug: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.slug = slug


class InvalidSlugError(DomainError):
    """Raised when a slug is not in URL-safe form."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_SLUG,
            message="Slug must contain only lowercase letters, numbers, and hyphens",
        )


class SlugConflictError(DomainError):
    """Raised when a derived slug is already taken by another event."""

    def __init__(self, slug: str) -> None:
        super().__init__(
            code=ErrorCode.SLUG_CONFLICT,
            message="Event with this title already exists",
        )
        self.slug = slug


class ReferenceNotFoundError(DomainError):
    """Raised when a booking names an event that does not exist."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.REFERENCE_NOT_FOUND,
            message="Referenced event does not exist",
        )
        self.event_id = event_id


class DuplicateBookingError(DomainError):
    """Raised when an email has already booked the event."""

    def __init__(self, event_id: str, email: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_BOOKING,
            message="This email has already booked the event",
        )
        self.event_id = event_id
        self.email = email


class StoreUnavailableError(DomainError):
    """Raised when the backing store cannot be reached."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.STORE_UNAVAILABLE,
            message="Event store temporarily unavailable",
        )
