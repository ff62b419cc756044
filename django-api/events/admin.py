from django.contrib import admin

from events.models import Booking, Event, EventTag


class EventTagInline(admin.TabularInline):
    model = EventTag
    extra = 1


class BookingInline(admin.TabularInline):
    model = Booking
    extra = 0
    readonly_fields = ["email", "created_at"]
    can_delete = False


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "slug", "date", "time", "mode", "created_at"]
    list_filter = ["mode"]
    search_fields = ["title", "location", "organizer"]
    readonly_fields = ["slug", "created_at", "updated_at"]
    inlines = [EventTagInline, BookingInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ["email", "event", "created_at"]
    list_filter = ["event"]
    search_fields = ["email"]
