"""
EventTracker - records product analytics events (feature usage, funnel steps).

Usage:
    tracker = EventTracker(enabled=settings.ANALYTICS_TRACKING_ENABLED)
    await tracker.initialize()          # application startup
    await tracker.track(
        "connection_path_viewed",
        category="network",
        user_id=user_id,
        properties={"degree": 2},
    )
    await tracker.close()               # application shutdown

Contract:
- track() is a no-op returning False until initialize() has run, after
  close(), or when the tracker is disabled.
- track() never raises; a failed insert is logged and reported as False.
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from fastapi import Request
from psycopg.types.json import Jsonb

from app.db.pool import DatabasePoolManager, db_pool
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

FUNNELS: dict[str, list[str]] = {
    "registration_to_first_application": [
        "registration",
        "profile_completed",
        "first_job_added",
        "first_application",
    ],
    "job_to_offer": [
        "job_saved",
        "application_submitted",
        "interview_scheduled",
        "offer_received",
    ],
}


class EventTracker:
    """Writes analytics events to the analytics_events table and the structured log."""

    def __init__(self, enabled: bool = True, pool: DatabasePoolManager | None = None):
        self.enabled = enabled
        self._pool = pool or db_pool
        self._initialized = False
        self.session_id: str | None = None

    @property
    def is_active(self) -> bool:
        return self.enabled and self._initialized

    async def initialize(self) -> None:
        if self._initialized:
            logger.warning("Event tracker already initialized")
            return
        self.session_id = f"session_{uuid.uuid4().hex[:12]}"
        self._initialized = True
        logger.info("Event tracker initialized", enabled=self.enabled, session_id=self.session_id)

    async def close(self) -> None:
        if not self._initialized:
            return
        self._initialized = False
        logger.info("Event tracker closed", session_id=self.session_id)

    async def track(
        self,
        event_name: str,
        category: str,
        user_id: str | None = None,
        properties: dict[str, Any] | None = None,
    ) -> bool:
        if not self.is_active:
            return False

        payload = {
            **(properties or {}),
            "timestamp": datetime.now(UTC).isoformat(),
            "session_id": self.session_id,
        }
        logger.info("Analytics event", event_name=event_name, category=category, user_id=user_id)

        try:
            async with self._pool.connection() as conn:
                await conn.execute(
                    """
                    INSERT INTO analytics_events (
                        user_id, event_name, event_category, event_properties, session_id
                    ) VALUES (%s, %s, %s, %s, %s)
                    """,
                    (user_id, event_name, category, Jsonb(payload), self.session_id),
                )
            return True
        except Exception as e:
            # Analytics must never break the request that produced the event
            logger.error(
                "Failed to store analytics event",
                error=str(e),
                error_type=type(e).__name__,
                event_name=event_name,
                user_id=user_id,
            )
            return False

    async def track_funnel_step(self, funnel_name: str, step: int, user_id: str | None = None) -> bool:
        steps = FUNNELS.get(funnel_name)
        if not steps or not 1 <= step <= len(steps):
            logger.debug("Unknown funnel step ignored", funnel=funnel_name, step=step)
            return False
        return await self.track(
            "funnel_step",
            category="funnel",
            user_id=user_id,
            properties={"funnel": funnel_name, "step": step, "step_name": steps[step - 1]},
        )


def get_event_tracker(request: Request) -> EventTracker:
    """FastAPI dependency returning the tracker created in app.main."""
    return request.app.state.event_tracker
