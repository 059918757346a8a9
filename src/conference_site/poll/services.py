"""Speaker poll service.

All vote changes go through the database (``F()`` expressions and bulk
updates) so concurrent voters never lose increments.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from django.db.models import F, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from conference_site.poll.models import SpeakerPoll

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PollResults:
    """Poll rows in ranking order plus the total number of votes."""

    rows: list[SpeakerPoll]
    total_votes: int

    def percentage(self, row: SpeakerPoll) -> float:
        """Return *row*'s share of the vote as a percentage (0 when nobody voted)."""
        if not self.total_votes:
            return 0.0
        return round(row.votes * 100 / self.total_votes, 1)


def serialize_poll_row(row: SpeakerPoll) -> dict[str, object]:
    """Return a JSON-ready dict for a poll row."""
    return {
        "id": row.pk,
        "speaker": row.speaker,
        "votes": row.votes,
        "createdAt": row.created_at.isoformat(),
        "updatedAt": row.updated_at.isoformat(),
    }


class PollService:
    """Stateless service for the speaker poll."""

    @staticmethod
    def results() -> PollResults:
        """Return every speaker ordered by votes (desc) then name (asc)."""
        rows = list(SpeakerPoll.objects.order_by("-votes", "speaker"))
        return PollResults(rows=rows, total_votes=sum(row.votes for row in rows))

    @staticmethod
    def total_votes() -> int:
        """Return the number of votes cast across all speakers."""
        return SpeakerPoll.objects.aggregate(total=Coalesce(Sum("votes"), 0))["total"]

    @staticmethod
    def cast_vote(speaker: str) -> SpeakerPoll:
        """Add one vote for *speaker* and return the refreshed row.

        Raises:
            SpeakerPoll.DoesNotExist: If no poll entry exists for *speaker*.
        """
        updated = SpeakerPoll.objects.filter(speaker=speaker).update(
            votes=F("votes") + 1,
            updated_at=timezone.now(),
        )
        if not updated:
            msg = f"Unknown speaker: {speaker!r}"
            raise SpeakerPoll.DoesNotExist(msg)
        logger.info("Vote recorded for %s", speaker)
        return SpeakerPoll.objects.get(speaker=speaker)

    @staticmethod
    def reset() -> int:
        """Set every counter back to zero.

        Returns:
            The number of rows reset.
        """
        count = SpeakerPoll.objects.update(votes=0, updated_at=timezone.now())
        logger.info("Speaker poll reset (%d speakers)", count)
        return count

    @staticmethod
    def seed(speakers: Iterable[str]) -> list[SpeakerPoll]:
        """Create poll entries for speakers that do not have one yet.

        Existing entries keep their vote counts.

        Returns:
            The entries that were created.
        """
        names = list(dict.fromkeys(name.strip() for name in speakers if name and name.strip()))
        existing = set(SpeakerPoll.objects.filter(speaker__in=names).values_list("speaker", flat=True))
        created = SpeakerPoll.objects.bulk_create(
            [SpeakerPoll(speaker=name) for name in names if name not in existing],
            ignore_conflicts=True,
        )
        if created:
            logger.info("Seeded %d speaker(s) into the poll", len(created))
        return created
