"""
API fixtures: app with the test database and a seeded session store
"""
import random
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from lifesync.api.deps import get_db
from lifesync.application.local_seed import seed_demo_data
from lifesync.application.local_store import LocalDataStore
from lifesync.infrastructure.preferences import CurrentUserPreference
from lifesync.infrastructure.storage.memory import InMemoryBlobStorage
from lifesync.main import create_app


@pytest.fixture
def local_store():
    return seed_demo_data(LocalDataStore(
        clock=lambda: datetime(2026, 2, 14, 9, 30, tzinfo=timezone.utc),
        rng=random.Random(7),
    ))


@pytest.fixture
def storage():
    return InMemoryBlobStorage()


@pytest.fixture
def preferences(tmp_path):
    return CurrentUserPreference(tmp_path / "prefs.json")


@pytest.fixture
def app(db_session, local_store, storage, preferences):
    app = create_app(local_store=local_store, storage=storage, preferences=preferences)

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    return app


@pytest.fixture
def client(app):
    """Test client for the FastAPI app"""
    return TestClient(app)


@pytest.fixture
def auth_headers(sample_user_id):
    return {"X-User-Id": sample_user_id}
