"""Loaded engine state: behaviour profiles, patterns and priority models."""

from datetime import datetime, timedelta

from django.utils import timezone

import structlog

from engine.config import EngineSettings
from engine.exceptions import EngineStateError
from engine.services.notification_store import NotificationStore
from engine.services.pattern_catalog import PatternCatalog
from engine.services.priority_models import PriorityModelRegistry
from engine.services.profile_store import ProfileStore

logger = structlog.get_logger(__name__)


class EngineState:
    """State an engine scores and schedules with, injected at construction.

    The state starts unloaded. ``load`` fills it from the notification
    store; ``refresh`` runs the same load again later. An engine whose state
    has never loaded successfully runs degraded and sends basic
    notifications. A failed refresh keeps serving the previously loaded
    data.
    """

    def __init__(
        self,
        settings: EngineSettings,
        store: NotificationStore,
        profiles: ProfileStore | None = None,
        patterns: PatternCatalog | None = None,
        models: PriorityModelRegistry | None = None,
    ) -> None:
        """Initialize unloaded state.

        Args:
            settings: Engine settings with history windows and model config.
            store: Source of historical interactions.
            profiles: Profile store, a new empty one when omitted.
            patterns: Pattern catalog, a new empty one when omitted.
            models: Model registry, built from settings when omitted.
        """
        self.settings = settings
        self.store = store
        self.profiles = profiles or ProfileStore()
        self.patterns = patterns or PatternCatalog()
        self.models = models or PriorityModelRegistry(settings.priority_models)
        self.ready = False
        self.load_attempted = False
        self.loaded_at: datetime | None = None
        self.last_error: str | None = None

    @property
    def degraded(self) -> bool:
        """True until the first successful load."""
        return not self.ready

    async def load(self, now: datetime | None = None) -> None:
        """Load priority models, behaviour profiles and global patterns.

        Args:
            now: Reference time for the history windows.

        Raises:
            EngineStateError: If any stage fails; the failing stage is named.
        """
        now = now or timezone.now()
        self.load_attempted = True
        stage = "priority_models"
        try:
            self.models.load()

            stage = "profiles"
            profile_since = now - timedelta(days=self.settings.profile_history_days)
            interactions = await self.store.historical_interactions(profile_since)
            self.profiles.load(interactions)

            stage = "patterns"
            pattern_since = now - timedelta(days=self.settings.pattern_history_days)
            if pattern_since >= profile_since:
                recent = [i for i in interactions if i.sent_at >= pattern_since]
            else:
                recent = await self.store.historical_interactions(pattern_since)
            self.patterns.load(recent)
        except Exception as e:
            self.last_error = f"{stage}: {e}"
            logger.error(
                "engine_state_load_failed",
                stage=stage,
                error=str(e),
                error_type=type(e).__name__,
                degraded=not self.ready,
            )
            raise EngineStateError(stage, str(e)) from e

        self.ready = True
        self.loaded_at = now
        self.last_error = None
        logger.info(
            "engine_state_loaded",
            profile_count=len(self.profiles),
            pattern_count=len(self.patterns),
            model_count=len(self.models),
        )

    async def refresh(self, now: datetime | None = None) -> None:
        """Reload all state; see ``load``."""
        await self.load(now)
