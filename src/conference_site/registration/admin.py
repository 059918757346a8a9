"""Django admin configuration for the registration app."""

from django.contrib import admin

from conference_site.registration.models import Attendee, Registration


class AttendeeInline(admin.TabularInline):
    """Attendees listed on their registration."""

    model = Attendee
    extra = 0
    fields = ("name", "email", "phone", "shirt_size", "wants_shirt", "notes")
    readonly_fields = ("wants_shirt",)


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    """Admin interface for registrations.

    The prayer request is encrypted at rest and only shown on the detail
    page, never in the changelist.
    """

    list_display = ("contact_name", "contact_email", "contact_phone", "attendee_count", "created_at")
    search_fields = ("contact_name", "contact_email", "contact_phone", "attendees__name", "attendees__email")
    readonly_fields = ("created_at", "updated_at")
    date_hierarchy = "created_at"
    inlines = [AttendeeInline]

    @admin.display(description="Attendees")
    def attendee_count(self, obj: Registration) -> int:
        """Return the number of attendees on the registration."""
        return obj.attendees.count()


@admin.register(Attendee)
class AttendeeAdmin(admin.ModelAdmin):
    """Admin interface for individual attendees."""

    list_display = ("name", "email", "phone", "shirt_size", "registration", "created_at")
    list_filter = ("wants_shirt", "shirt_size")
    search_fields = ("name", "email", "phone")
    raw_id_fields = ("registration",)
