"""Forms for the poll app."""

from django import forms

from conference_site.poll.models import SpeakerPoll


class VoteForm(forms.Form):
    """Pick one speaker to vote for."""

    speaker = forms.ChoiceField(widget=forms.RadioSelect)

    def __init__(self, *args: object, **kwargs: object) -> None:
        super().__init__(*args, **kwargs)  # type: ignore[arg-type]
        names = SpeakerPoll.objects.order_by("speaker").values_list("speaker", flat=True)
        self.fields["speaker"].choices = [(name, name) for name in names]
