"""Pytest fixtures for PDF service tests."""

import pytest
from fastapi.testclient import TestClient

from pdf_service.config import Settings
from pdf_service.main import create_app

FAKE_PDF = b"%PDF-1.7\n%fake\n%%EOF\n"


class FakeRenderer:
    """Stands in for PdfRenderer; records calls instead of launching Chromium."""

    def __init__(self, result: bytes = FAKE_PDF, error: Exception = None):
        self.result = result
        self.error = error
        self.calls = []

    async def render(self, target, options, request_id=None):
        self.calls.append((target, options, request_id))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def settings():
    """Settings allowing example.com with a relative-path base."""
    return Settings(
        allowed_domains="example.com",
        pdf_target_base_url="https://app.example.com",
        settle_delay_ms=0,
    )


@pytest.fixture
def fake_renderer():
    return FakeRenderer()


@pytest.fixture
def make_client(fake_renderer):
    """Factory building a started TestClient for the given settings."""
    clients = []

    def _make(settings: Settings) -> TestClient:
        app = create_app(settings)
        client = TestClient(app)
        client.__enter__()
        app.state.renderer = fake_renderer
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, settings):
    return make_client(settings)
