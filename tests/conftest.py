"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - fake_upstream: Replaces the upstream singleton with FakeUpstream
    - async_client: HTTPX client for API testing
    - store: Empty in-memory key/value store
    - no_credentials: Environment without any upstream API key
"""

from collections.abc import AsyncGenerator, Iterator

import pytest
from httpx import ASGITransport, AsyncClient

import relaychat.agent.upstream as upstream_module
from relaychat.api import app
from relaychat.storage.store import MappingStore
from tests.fakes import FakeUpstream


@pytest.fixture
def fake_upstream() -> Iterator[FakeUpstream]:
    """Install a FakeUpstream as the upstream singleton.

    Yields:
        The installed fake, for configuring replies and inspecting calls.
    """
    fake = FakeUpstream()
    upstream_module._upstream_service = fake  # type: ignore[assignment]
    yield fake
    upstream_module._upstream_service = None


@pytest.fixture
def no_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear the upstream singleton and every API key variable."""
    monkeypatch.setattr(upstream_module, "_upstream_service", None)
    monkeypatch.delenv("LLM_API_KEY", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "")


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def store() -> MappingStore:
    return MappingStore()
