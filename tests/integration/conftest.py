"""
Integration test configuration.

Every test gets a fresh app wired to in-memory storage and a fake shortener
provider, driven through FastAPI's TestClient (which runs the lifespan).
"""

import pytest
from fastapi.testclient import TestClient

from utm_builder.app import create_app
from utm_builder.config import AppSettings
from utm_builder.errors import ErrorKind, ShortenError
from utm_builder.infrastructure.storage.memory import InMemoryStorage
from utm_builder.schemas.models.shortener import ShortenedUrl
from utm_builder.shared.result import Err, Ok


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


class FakeProvider:
    """Shortener provider that answers from a canned result."""

    name = "TinyURL"

    def __init__(self, short_url="https://tinyurl.com/fake", error_kind=None):
        self.short_url = short_url
        self.error_kind = error_kind
        self.calls = []

    async def shorten(self, url):
        self.calls.append(url)
        if self.error_kind is not None:
            return Err(ShortenError("TinyURL failed", self.error_kind))
        return Ok(ShortenedUrl(short_url=self.short_url, provider=self.name))


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def make_client(storage):
    clients = []

    def _make(providers=(), settings=None):
        app = create_app(settings or AppSettings(), storage=storage, providers=list(providers))
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, provider):
    return make_client([provider])


@pytest.fixture
def make_provider():
    return FakeProvider
