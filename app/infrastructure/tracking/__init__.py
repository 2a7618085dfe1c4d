"""
Product analytics event tracking.

The tracker is process-wide state with an explicit lifecycle: it is created
once in app.main, opened and closed by the application lifespan, and reached
from routes through the `get_event_tracker` dependency.
"""

from app.infrastructure.tracking.event_tracker import EventTracker, get_event_tracker

__all__ = ["EventTracker", "get_event_tracker"]
