#!/usr/bin/env python
"""Script to run the Django development server."""

import os
import sys

from django.core.management import execute_from_command_line


def main():
    """Run the Django development server.

    The engine starts degraded when the database is unreachable and keeps
    serving basic notifications, so the server is started without waiting
    for migrations.
    """
    os.environ.setdefault(
        "DJANGO_SETTINGS_MODULE", "smart_notification_service.settings"
    )
    execute_from_command_line([sys.argv[0], "runserver", "--skip-checks", *sys.argv[1:]])


if __name__ == "__main__":
    main()
