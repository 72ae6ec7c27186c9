import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from backend.app.core.clock import Clock
from backend.app.core.config import settings
from backend.app.deps import build_components, get_components
from backend.app.main import app
from backend.app.store.memory import MemoryStore
from backend.tests.factories import NOW, RecordingNotifier


@pytest.fixture
def clock() -> Clock:
    return Clock(60, now=lambda: NOW)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def components(store, clock, notifier):
    return build_components(store, clock=clock, notifier=notifier)


@pytest.fixture
def staff_headers(monkeypatch) -> dict[str, str]:
    monkeypatch.setattr(settings, "STAFF_API_TOKEN", "staff-secret")
    return {"X-Staff-Token": "staff-secret"}


@pytest_asyncio.fixture
async def client(components, monkeypatch):
    monkeypatch.setattr(settings, "REDIS_URL", None)
    app.dependency_overrides[get_components] = lambda: components
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
