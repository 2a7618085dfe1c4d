import pytest

from app.auth.verify import auth_dependency


@pytest.fixture
def auth_override():
    def _override():
        return {"sub": "user-123"}

    return _override


class FakeTracker:
    """Stands in for EventTracker on app.state; records every call."""

    def __init__(self):
        self.enabled = True
        self.is_active = True
        self.events: list[dict] = []

    async def track(self, event_name, category, user_id=None, properties=None) -> bool:
        self.events.append(
            {
                "event_name": event_name,
                "category": category,
                "user_id": user_id,
                "properties": properties or {},
            }
        )
        return True


@pytest.fixture
def fake_tracker():
    return FakeTracker()


@pytest.fixture
def apply_auth_override(auth_override):
    def _apply(app):
        app.dependency_overrides[auth_dependency] = auth_override

    return _apply


@pytest.fixture
def api_client(apply_auth_override, fake_tracker):
    """TestClient with auth stubbed and the event tracker swapped for a fake."""
    from fastapi.testclient import TestClient

    from app.infrastructure.tracking import get_event_tracker
    from app.main import app

    apply_auth_override(app)
    app.dependency_overrides[get_event_tracker] = lambda: fake_tracker
    yield TestClient(app)
    app.dependency_overrides.clear()
