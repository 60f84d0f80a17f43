"""
Pytest fixtures: in-memory store, fake storage / notifier / realtime feed,
HTTP client with dependency overrides, and Supabase-style access tokens.
"""

import os

# settings 는 import 시점에 읽으므로 dancelink import 전에 세팅
os.environ["SUPABASE_URL"] = "https://dancelink-test.supabase.co"
os.environ["SUPABASE_ANON_KEY"] = "test-anon-key"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["SUPABASE_ISSUER"] = ""
os.environ["RESEND_API_KEY"] = "re_test_key"

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from dancelink.deps import get_feed, get_notifier, get_storage, get_store
from dancelink.main import app
from dancelink.schemas.session import SessionContext
from dancelink.services.storage_service import StorageService

from fakes import (
    DANCER_ID,
    ORGANIZER_ID,
    OTHER_DANCER_ID,
    OTHER_ORGANIZER_ID,
    FakeFeed,
    FakeNotifier,
    FakeStorageClient,
    InMemoryStore,
    bearer,
)


@pytest.fixture
def store() -> InMemoryStore:
    """Store seeded with two dancers and two organizers."""
    s = InMemoryStore()
    s.add_profile(DANCER_ID, name="Dana", email="dana@example.com")
    s.add_profile(OTHER_DANCER_ID, name="Bo", email="bo@example.com", dance_style="Jazz", gender="Male")
    s.add_organizer(ORGANIZER_ID, name="Olivia", email="olivia@example.com")
    s.add_organizer(OTHER_ORGANIZER_ID, name="Oscar", email="oscar@example.com")
    return s


@pytest.fixture
def storage_client() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def feed() -> FakeFeed:
    return FakeFeed()


@pytest.fixture
def dancer() -> SessionContext:
    return SessionContext(user_id=DANCER_ID, email="dana@example.com", role="dancer")


@pytest.fixture
def organizer() -> SessionContext:
    return SessionContext(user_id=ORGANIZER_ID, email="olivia@example.com", role="organizer")


@pytest.fixture
def event(store: InMemoryStore):
    """One event owned by ORGANIZER_ID."""
    return store.add_event(ORGANIZER_ID, name="Spring Gala")


@pytest.fixture
def application(store: InMemoryStore, event):
    """Pending application from DANCER_ID to the event."""
    row = {
        "id": "app-1",
        "event_id": event.id,
        "dancer_id": DANCER_ID,
        "status": "pending",
        "created_at": store._now(),
        "updated_at": None,
    }
    store.applications[row["id"]] = row
    return row


@pytest.fixture
def overridden_app(store, storage_client, notifier, feed):
    """FastAPI app wired to the fakes (lifespan is not run)."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_storage] = lambda: StorageService(storage_client)
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_feed] = lambda: feed
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(overridden_app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=overridden_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def dancer_headers() -> dict:
    return bearer(DANCER_ID)


@pytest.fixture
def organizer_headers() -> dict:
    return bearer(ORGANIZER_ID)
