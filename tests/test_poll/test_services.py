"""Tests for the speaker poll service."""

import pytest

from conference_site.poll.models import SpeakerPoll
from conference_site.poll.services import PollResults, PollService, serialize_poll_row


@pytest.fixture
def speakers(db):
    return [
        SpeakerPoll.objects.create(speaker="Brooke Kinchen", votes=3),
        SpeakerPoll.objects.create(speaker="Bradley Bennett", votes=3),
        SpeakerPoll.objects.create(speaker="Adam Apple", votes=1),
    ]


@pytest.mark.django_db
class TestResults:
    def test_orders_by_votes_then_name(self, speakers):
        results = PollService.results()

        assert [row.speaker for row in results.rows] == ["Bradley Bennett", "Brooke Kinchen", "Adam Apple"]
        assert results.total_votes == 7

    def test_percentage(self, speakers):
        results = PollService.results()
        assert results.percentage(results.rows[0]) == 42.9
        assert results.percentage(results.rows[2]) == 14.3

    def test_percentage_without_votes_is_zero(self):
        row = SpeakerPoll(speaker="Nobody", votes=0)
        assert PollResults(rows=[row], total_votes=0).percentage(row) == 0.0

    def test_total_votes(self, speakers):
        assert PollService.total_votes() == 7

    def test_total_votes_empty_poll(self, db):
        assert PollService.total_votes() == 0


@pytest.mark.django_db
class TestCastVote:
    def test_increments_by_one(self, speakers):
        row = PollService.cast_vote("Adam Apple")

        assert row.votes == 2
        assert SpeakerPoll.objects.get(speaker="Adam Apple").votes == 2

    def test_repeated_votes_accumulate(self, speakers):
        for _ in range(5):
            PollService.cast_vote("Adam Apple")
        assert SpeakerPoll.objects.get(speaker="Adam Apple").votes == 6

    def test_unknown_speaker_raises(self, speakers):
        with pytest.raises(SpeakerPoll.DoesNotExist, match="Unknown speaker"):
            PollService.cast_vote("Somebody Else")
        assert PollService.total_votes() == 7


@pytest.mark.django_db
class TestResetAndSeed:
    def test_reset_zeroes_every_row(self, speakers):
        assert PollService.reset() == 3
        assert set(SpeakerPoll.objects.values_list("votes", flat=True)) == {0}

    def test_seed_creates_missing_speakers_only(self, speakers):
        created = PollService.seed(["Adam Apple", " New Speaker ", "", "New Speaker"])

        assert [row.speaker for row in created] == ["New Speaker"]
        assert SpeakerPoll.objects.get(speaker="Adam Apple").votes == 1
        assert SpeakerPoll.objects.get(speaker="New Speaker").votes == 0

    def test_seed_is_idempotent(self, db):
        PollService.seed(["Bradley Bennett"])
        PollService.seed(["Bradley Bennett"])
        assert SpeakerPoll.objects.count() == 1


@pytest.mark.django_db
def test_serialize_poll_row(speakers):
    data = serialize_poll_row(speakers[0])
    assert data["id"] == speakers[0].pk
    assert data["speaker"] == "Brooke Kinchen"
    assert data["votes"] == 3
    assert set(data) == {"id", "speaker", "votes", "createdAt", "updatedAt"}
