"""Tests for the advisory gateway."""

import pytest

from fhr_mart.advisor import (
    EMPTY_REPLY_MESSAGE,
    FALLBACK_MESSAGE,
    OFFLINE_MESSAGE,
    AdvisoryGateway,
    build_catalog_listing,
    build_user_prompt,
)
from fhr_mart.config import Settings


@pytest.fixture
def online_settings():
    return Settings(environment="testing", openai_api_key="test-key", anthropic_api_key="")


class TestOffline:
    async def test_no_key_returns_offline_without_calling_out(self, settings, catalog, monkeypatch):
        gateway = AdvisoryGateway(settings)
        calls = []

        async def record(*args):
            calls.append(args)
            return "should not happen"

        monkeypatch.setattr(gateway, "_ask_openai", record)
        monkeypatch.setattr(gateway, "_ask_anthropic", record)

        assert await gateway.get_advice("headphones", catalog.products) == OFFLINE_MESSAGE
        assert calls == []
        assert gateway.configured is False


class TestOnline:
    async def test_returns_remote_text(self, online_settings, catalog, monkeypatch):
        gateway = AdvisoryGateway(online_settings)
        seen = {}

        async def fake_openai(system, prompt):
            seen["system"] = system
            seen["prompt"] = prompt
            return "  Grab the Stealth Pro for Rs. 14999.  "

        monkeypatch.setattr(gateway, "_ask_openai", fake_openai)
        advice = await gateway.get_advice("quiet headphones", catalog.products)

        assert advice == "Grab the Stealth Pro for Rs. 14999."
        assert '"quiet headphones"' in seen["prompt"]
        assert "FHR Mart" in seen["system"]

    async def test_remote_failure_returns_fallback(self, online_settings, catalog, monkeypatch):
        gateway = AdvisoryGateway(online_settings)

        async def broken(system, prompt):
            raise ConnectionError("upstream unavailable")

        monkeypatch.setattr(gateway, "_ask_openai", broken)
        assert await gateway.get_advice("anything", catalog.products) == FALLBACK_MESSAGE

    async def test_empty_reply(self, online_settings, catalog, monkeypatch):
        gateway = AdvisoryGateway(online_settings)

        async def empty(system, prompt):
            return None

        monkeypatch.setattr(gateway, "_ask_openai", empty)
        assert await gateway.get_advice("anything", catalog.products) == EMPTY_REPLY_MESSAGE

    async def test_anthropic_used_without_openai_key(self, catalog, monkeypatch):
        gateway = AdvisoryGateway(
            Settings(environment="testing", openai_api_key="", anthropic_api_key="test-key")
        )

        async def fake_anthropic(system, prompt):
            return "Try the keyboard."

        monkeypatch.setattr(gateway, "_ask_anthropic", fake_anthropic)
        assert await gateway.get_advice("typing", catalog.products) == "Try the keyboard."


class TestPrompt:
    def test_catalog_listing(self, headphones):
        listing = build_catalog_listing([headphones])
        assert listing.startswith("Stealth Pro Wireless Headphones (Rs. 14999) - Active noise")

    def test_user_prompt_lists_every_product(self, catalog):
        prompt = build_user_prompt("gift ideas", catalog.products)
        assert prompt.count("\n") >= len(catalog)
        for product in catalog:
            assert product.name in prompt
