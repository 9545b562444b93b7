import pytest
from dotenv import load_dotenv

from fakes import FakeBackend, make_artifact

# Load environment variables from .env file for tests
load_dotenv()


@pytest.fixture
def five_pages_backend():
    """Pages 0..4 hold two artifacts each; page 5 is empty."""
    return FakeBackend(pages={p: [make_artifact(p, 0), make_artifact(p, 1)] for p in range(5)})


@pytest.fixture
def api_env(monkeypatch):
    """Fixture to configure API keys for the HTTP layer."""
    monkeypatch.setenv("API_KEYS", "test-key-1,test-key-2")
    return {"X-API-Key": "test-key-1"}
