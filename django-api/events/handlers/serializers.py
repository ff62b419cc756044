"""Serializers for transforming domain models to API responses."""

from rest_framework import serializers


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    slug = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField()
    overview = serializers.CharField()
    image = serializers.CharField()
    venue = serializers.CharField()
    location = serializers.CharField()
    date = serializers.DateField()
    time = serializers.CharField()
    mode = serializers.CharField(source="mode.value")
    audience = serializers.CharField()
    organizer = serializers.CharField()
    agenda = serializers.ListField(child=serializers.CharField())
    tags = serializers.ListField(child=serializers.CharField())
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")


class BookingSerializer(serializers.Serializer):
    """Serializer for Booking domain model."""

    id = serializers.UUIDField(source="id.value")
    eventId = serializers.UUIDField(source="event_id.value")
    email = serializers.EmailField()
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")


class PaginationSerializer(serializers.Serializer):
    """Serializer for the paging block of a Page."""

    currentPage = serializers.IntegerField(source="current_page")
    totalPages = serializers.IntegerField(source="total_pages")
    totalCount = serializers.IntegerField(source="total_count")
    hasNextPage = serializers.BooleanField(source="has_next_page")
    hasPrevPage = serializers.BooleanField(source="has_prev_page")
    limit = serializers.IntegerField()
