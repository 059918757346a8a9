"""Speaker poll model for conference-site."""

from django.db import models


class SpeakerPoll(models.Model):
    """Vote counter for one speaker.

    ``votes`` only changes through atomic ``F("votes") + 1`` updates or an
    admin reset to zero.
    """

    speaker = models.CharField(max_length=200, unique=True)
    votes = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-votes", "speaker"]
        verbose_name = "speaker poll entry"
        verbose_name_plural = "speaker poll"

    def __str__(self) -> str:
        return f"{self.speaker} ({self.votes})"
