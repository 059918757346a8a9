#!/usr/bin/env python
"""Run the conference site locally: ``python manage.py migrate && python manage.py runserver``."""

import os
import sys


def main() -> None:
    """Point Django at the example settings and dispatch the command line."""
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "settings")
    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
