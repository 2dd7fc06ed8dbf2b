"""
Pytest fixtures for cascade-api tests.
"""

from typing import Any, Dict, Generator, List

import pytest
from fastapi.testclient import TestClient

from api.deps import (
    get_current_user,
    get_document_store,
    get_lock_registry,
    get_settings,
)
from application.locks import ScopeLockRegistry
from backend.main import create_app
from backend.settings import Settings
from tests.fakes import FakeDocumentStore, seed_tree


# ---------------------------------------------------------------------------
# Auth Mock
# ---------------------------------------------------------------------------

TEST_USER_ID = "test-user-123"
OTHER_USER_ID = "other-user-456"
PROGRAM_ID = "program-1"


async def mock_get_current_user() -> str:
    """Mock auth dependency that returns a test user."""
    return TEST_USER_ID


# ---------------------------------------------------------------------------
# Mock Environment Variables
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Set mock environment variables for tests."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("DOCUMENT_STORE_BACKEND", "firestore")


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_store() -> FakeDocumentStore:
    """Fresh in-memory document store."""
    return FakeDocumentStore()


@pytest.fixture
def lock_registry() -> ScopeLockRegistry:
    return ScopeLockRegistry()


# ---------------------------------------------------------------------------
# Test App and Client
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Test settings with minimal configuration."""
    return Settings(
        environment="test",
        document_store_backend="firestore",
        _env_file=None,
    )


@pytest.fixture(scope="session")
def app(test_settings):
    """Create test application instance."""
    return create_app(settings=test_settings)


@pytest.fixture
def client(app, test_settings, fake_store, lock_registry) -> Generator[TestClient, None, None]:
    """
    Per-test FastAPI TestClient backed by the fake store.
    Properly cleans up dependency overrides after each test.
    """
    app.dependency_overrides[get_current_user] = mock_get_current_user
    app.dependency_overrides[get_document_store] = lambda: fake_store
    app.dependency_overrides[get_lock_registry] = lambda: lock_registry
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def unauthenticated_client(app, fake_store) -> Generator[TestClient, None, None]:
    """TestClient using the real X-User-Id auth dependency."""
    app.dependency_overrides[get_document_store] = lambda: fake_store
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Domain Fixtures - Program trees
# ---------------------------------------------------------------------------


def strength_sets(prefix: str, count: int) -> List[Dict[str, Any]]:
    return [
        {
            "id": f"{prefix}-s{n}",
            "setNumber": n,
            "reps": 8,
            "weight": 100.0,
            "restTime": 90,
            "checked": True,
            "completedAt": "2024-03-01T10:00:00+00:00",
            # Left over from before the exercise was strength
            "duration": 30,
        }
        for n in range(1, count + 1)
    ]


def cardio_sets(prefix: str, count: int) -> List[Dict[str, Any]]:
    return [
        {
            "id": f"{prefix}-s{n}",
            "setNumber": n,
            "duration": 600,
            "distance": 2.5,
            "checked": True,
            # Stale strength metric that must never be copied
            "weight": 20.0,
        }
        for n in range(1, count + 1)
    ]


def leg_day_week(week_id: str = "week-leg", name: str = "Leg Day", order: int = 1) -> Dict[str, Any]:
    """
    Week with 2 workouts, each with 1 strength exercise (3 sets) and
    1 cardio exercise (2 sets): 2 workouts, 4 exercises, 10 sets.
    """
    workouts = []
    for w in (1, 2):
        workout_id = f"{week_id}-wo{w}"
        workouts.append(
            {
                "id": workout_id,
                "name": f"Legs {w}",
                "orderIndex": w,
                "dayOfWeek": w * 2,
                "exercises": [
                    {
                        "id": f"{workout_id}-squat",
                        "name": "Back Squat",
                        "exerciseType": "strength",
                        "orderIndex": 1,
                        "sets": strength_sets(f"{workout_id}-squat", 3),
                    },
                    {
                        "id": f"{workout_id}-bike",
                        "name": "Bike",
                        "exerciseType": "cardio",
                        "orderIndex": 2,
                        "sets": cardio_sets(f"{workout_id}-bike", 2),
                    },
                ],
            }
        )
    return {"id": week_id, "name": name, "order": order, "workouts": workouts}


@pytest.fixture
def leg_day_store(fake_store) -> FakeDocumentStore:
    """Fake store holding one program with the Leg Day week."""
    seed_tree(fake_store, TEST_USER_ID, PROGRAM_ID, [leg_day_week()])
    return fake_store
