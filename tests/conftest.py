# tests/conftest.py
import pytest
import httpx
from fastapi.testclient import TestClient
import sys
import os

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.config import Settings
from app.llm.client import GeminiClient
from app.llm.rate_limiter import RateLimiter
from app.memory.store import ChatSession
from app.workflow.document_qa import QueryDispatcher

from helpers import FakeClock, VALID_API_KEY, gemini_success


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(api_key=VALID_API_KEY)


@pytest.fixture
def sent_requests():
    """Requests seen by the mock model endpoint, in order."""
    return []


@pytest.fixture
def make_dispatcher(fake_clock, sent_requests):
    """
    Build a QueryDispatcher wired to a mock Gemini endpoint.

    Usage:
        dispatcher = make_dispatcher(lambda request: httpx.Response(200, json=...))
    """

    def _make(handler=None, api_key: str = VALID_API_KEY, **settings_overrides):

        if handler is None:
            handler = lambda request: httpx.Response(200, json=gemini_success())

        def _record(request: httpx.Request) -> httpx.Response:
            sent_requests.append((fake_clock(), request))
            return handler(request)

        settings = Settings(api_key=api_key, **settings_overrides)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(_record))

        return QueryDispatcher(
            settings=settings,
            rate_limiter=RateLimiter(
                settings.min_request_interval,
                clock=fake_clock,
                sleep=fake_clock.sleep,
            ),
            llm_client=GeminiClient(settings, http_client=http_client),
            sleep=fake_clock.sleep,
        )

    return _make


@pytest.fixture
def api_client(make_dispatcher):
    """
    FastAPI test client bound to a fresh session with a mocked endpoint.

    Returns (client, session) so tests can inspect session state.
    """
    from app.main import app
    from app.api.routes import get_session

    def _client(handler=None, api_key: str = VALID_API_KEY, **settings_overrides):

        session = ChatSession(
            dispatcher=make_dispatcher(handler, api_key=api_key, **settings_overrides)
        )

        app.dependency_overrides[get_session] = lambda: session

        return TestClient(app), session

    yield _client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_text_content():
    """A small plain-text document with irregular whitespace."""
    return b"Quarterly report.\n\n  Revenue grew   by 12%.\tCosts fell."
