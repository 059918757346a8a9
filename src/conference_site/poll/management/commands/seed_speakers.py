"""Management command to seed the speaker poll."""

from typing import Any

from django.core.management.base import BaseCommand, CommandError, CommandParser

from conference_site.config_loader import load_speakers
from conference_site.poll.services import PollService
from conference_site.settings import get_config


class Command(BaseCommand):
    """Create poll entries for the conference speakers.

    Speakers come from ``CONFERENCE_SITE["speakers"]`` and, when given, a
    TOML file. Speakers already on the poll keep their votes.

    Usage::

        manage.py seed_speakers
        manage.py seed_speakers --config speakers.toml
        manage.py seed_speakers --config speakers.toml --dry-run
    """

    help = "Seed the speaker poll from settings and/or a TOML file."

    def add_arguments(self, parser: CommandParser) -> None:
        """Define the command-line arguments accepted by this command."""
        parser.add_argument(
            "--config",
            default="",
            help="Path to a speakers TOML file.",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            default=False,
            help="Print the speakers that would be seeded without saving.",
        )

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: ARG002
        """Execute the seed command."""
        config_path: str = options["config"]
        dry_run: bool = options["dry_run"]

        speakers = list(get_config().speakers)
        if config_path:
            try:
                speakers.extend(load_speakers(config_path))
            except (FileNotFoundError, ValueError) as exc:
                raise CommandError(str(exc)) from exc

        speakers = list(dict.fromkeys(speakers))
        if not speakers:
            msg = "No speakers configured. Set CONFERENCE_SITE['speakers'] or pass --config."
            raise CommandError(msg)

        if dry_run:
            self.stdout.write(self.style.NOTICE("Dry run: nothing will be saved."))
            for name in speakers:
                self.stdout.write(f"  {name}")
            return

        created = PollService.seed(speakers)
        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {len(created)} new speaker(s); {len(speakers) - len(created)} already on the poll."
            )
        )
