"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
The uniqueness constraints here are the authoritative backstop for slugs and
bookings; stores translate their IntegrityErrors into ConstraintViolation.
"""

import uuid

from django.db import models
from django.utils import timezone


class Event(models.Model):
    """Persistence model for events."""

    class Mode(models.TextChoices):
        ONLINE = "online"
        OFFLINE = "offline"
        HYBRID = "hybrid"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200)
    description = models.TextField(max_length=2000)
    overview = models.CharField(max_length=500)
    image = models.CharField(max_length=500)
    venue = models.CharField(max_length=255)
    location = models.CharField(max_length=255)
    date = models.DateField()
    time = models.CharField(max_length=8)
    mode = models.CharField(max_length=10, choices=Mode.choices)
    audience = models.CharField(max_length=255)
    organizer = models.CharField(max_length=255)
    agenda = models.JSONField(default=list)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["slug"], name="unique_event_slug"),
        ]
        indexes = [
            models.Index(fields=["date", "-created_at"], name="event_date_created_idx"),
            models.Index(fields=["mode"], name="event_mode_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class EventTag(models.Model):
    """One tag on an event; position keeps the order the organizer gave."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="tag_links")
    name = models.CharField(max_length=100)
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(fields=["event", "name"], name="unique_event_tag"),
        ]
        indexes = [
            models.Index(fields=["name"], name="event_tag_name_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Booking(models.Model):
    """Persistence model for bookings."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="bookings")
    email = models.EmailField(max_length=254)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "email"], name="unique_booking_event_email"
            ),
        ]
        indexes = [
            models.Index(fields=["email"], name="booking_email_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.email} - {self.event.title}"
