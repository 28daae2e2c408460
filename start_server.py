"""Production server startup script for the smart notification service.

This module provides the entry point for starting the Django application
with Gunicorn in production environments (Docker containers, Kubernetes).
The batch scheduler runs separately through the
``run_notification_scheduler`` management command.
"""

import os
import sys

from gunicorn.app.wsgiapp import run


def main():
    """Start the smart notification service using Gunicorn.

    Worker and thread counts can be tuned with GUNICORN_WORKERS and
    GUNICORN_THREADS. Logs go to stdout/stderr for container log
    aggregation.
    """
    sys.argv = [
        "gunicorn",
        "smart_notification_service.wsgi:application",
        "--bind",
        os.getenv("GUNICORN_BIND", "0.0.0.0:8000"),
        "--workers",
        os.getenv("GUNICORN_WORKERS", "4"),
        "--threads",
        os.getenv("GUNICORN_THREADS", "2"),
        "--timeout",
        "60",
        "--access-logfile",
        "-",
        "--error-logfile",
        "-",
    ]
    run()


if __name__ == "__main__":
    main()
