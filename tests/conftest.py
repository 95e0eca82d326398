"""Shared test fixtures for the FHR Mart storefront."""

from __future__ import annotations

import pytest

from fhr_mart.advisor import AdvisoryGateway
from fhr_mart.catalog import DEFAULT_CATALOG
from fhr_mart.config import Settings
from fhr_mart.session import StorefrontSession
from fhr_mart.streaming import StorefrontEventStream


class FakeAdvisor(AdvisoryGateway):
    """Advisor that answers from a canned reply without any network call."""

    def __init__(self, settings: Settings, reply: str = "Try the Stealth Pro headphones.") -> None:
        super().__init__(settings)
        self.reply = reply
        self.queries: list[str] = []

    async def get_advice(self, query, products):  # type: ignore[override]
        self.queries.append(query)
        return self.reply


@pytest.fixture
def settings():
    """Test settings with no LLM keys configured."""
    return Settings(
        environment="testing",
        openai_api_key="",
        anthropic_api_key="",
        toast_duration_seconds=3.0,
    )


@pytest.fixture
def catalog():
    return DEFAULT_CATALOG


@pytest.fixture
def headphones(catalog):
    return catalog.get("1")


@pytest.fixture
def keyboard(catalog):
    return catalog.get("2")


@pytest.fixture
def fake_advisor(settings):
    return FakeAdvisor(settings)


@pytest.fixture
def event_stream():
    return StorefrontEventStream()


@pytest.fixture
def session(fake_advisor, catalog, event_stream):
    return StorefrontSession(
        session_id="test-session",
        advisor=fake_advisor,
        catalog=catalog,
        events=event_stream,
    )
