import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so 'src' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SUPABASE_DISABLED", "1")


@pytest.fixture(scope="session")
def app():
    # lazy import after env configured
    from src.main import create_app

    return create_app()


@pytest.fixture()
def client(app) -> TestClient:
    app.dependency_overrides.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_header() -> dict[str, str]:
    # any token is accepted in disabled mode
    return {"Authorization": "Bearer test-token"}


@pytest.fixture(autouse=True)
def clear_memory_profiles():
    from src.infrastructure.database.repositories import profile_repository

    profile_repository._MEM_PROFILES.clear()
    yield
    profile_repository._MEM_PROFILES.clear()
