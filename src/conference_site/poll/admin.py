"""Django admin configuration for the poll app."""

from django.contrib import admin, messages
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils import timezone

from conference_site.poll.models import SpeakerPoll


@admin.register(SpeakerPoll)
class SpeakerPollAdmin(admin.ModelAdmin):
    """Admin interface for speaker poll entries.

    Vote counts are read-only here; use the reset action to clear them.
    """

    list_display = ("speaker", "votes", "updated_at")
    search_fields = ("speaker",)
    readonly_fields = ("votes", "created_at", "updated_at")
    actions = ["reset_votes"]

    @admin.action(description="Reset votes to zero")
    def reset_votes(self, request: HttpRequest, queryset: QuerySet[SpeakerPoll]) -> None:
        """Set the selected entries back to zero votes."""
        count = queryset.update(votes=0, updated_at=timezone.now())
        self.message_user(request, f"Reset {count} speaker(s).", messages.SUCCESS)
