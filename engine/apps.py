"""Django application configuration for the smart notification engine."""

from django.apps import AppConfig
from django.conf import settings


class EngineConfig(AppConfig):
    """Configuration class for the engine application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "engine"
    verbose_name = "Smart Notification Engine"

    def ready(self) -> None:
        """Configure structured logging once the app registry is ready.

        Engine state is not loaded here; the first request or the scheduler
        loads it so startup never blocks on the database.
        """
        if getattr(settings, "TEST_MODE", False):
            return

        from engine.logging import setup_logging  # noqa: PLC0415

        setup_logging()
