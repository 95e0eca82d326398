"""LLM-backed shopping advisor.

Turns a shopper's free-text question plus the catalog into a short
recommendation. The gateway never raises: a missing API key yields a fixed
offline message and any provider failure yields a fixed fallback message.
"""

from __future__ import annotations

from typing import Iterable

import structlog

from fhr_mart.config import Settings
from fhr_mart.models import Product

logger = structlog.get_logger(__name__)

OFFLINE_MESSAGE = "AI assistance is currently offline. Please check back later."
FALLBACK_MESSAGE = (
    "The store's AI is resting. Feel free to browse our premium collection manually!"
)
EMPTY_REPLY_MESSAGE = (
    "I'm having trouble thinking right now. How can I help you today?"
)

_SYSTEM_PROMPT = """\
Act as a high-end personal shopper for "{store_name}".
Recommend the best 1-2 products from the catalog or explain why we might not \
have a perfect match.
Keep it short, friendly, and stylish. Mention prices using the "{marker}" prefix.
Mention the store's commitment to quality for the Pakistani market.
"""


def build_catalog_listing(products: Iterable[Product], marker: str = "Rs.") -> str:
    """One ``name (Rs. price) - description`` line per product."""
    return "\n".join(f"{p.name} ({marker} {p.price}) - {p.description}" for p in products)


def build_user_prompt(query: str, products: Iterable[Product], marker: str = "Rs.") -> str:
    listing = build_catalog_listing(products, marker)
    return (
        f'User is looking for something: "{query}".\n'
        "Here is our product catalog with prices in Pakistani Rupees (PKR):\n"
        f"{listing}"
    )


class AdvisoryGateway:
    """Pass-through to an external text-generation API.

    Uses OpenAI when an OpenAI key is configured, otherwise Anthropic.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._openai_client: object | None = None
        self._anthropic_client: object | None = None

    @property
    def configured(self) -> bool:
        return self._settings.advisor_configured

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_advice(self, query: str, products: Iterable[Product]) -> str:
        """Return a displayable recommendation for *query*."""
        if not self.configured:
            logger.info("advisor_offline")
            return OFFLINE_MESSAGE

        system = _SYSTEM_PROMPT.format(
            store_name=self._settings.store_name,
            marker=self._settings.currency_marker,
        )
        prompt = build_user_prompt(query, products, self._settings.currency_marker)

        try:
            if self._settings.openai_api_key:
                text = await self._ask_openai(system, prompt)
            else:
                text = await self._ask_anthropic(system, prompt)
        except Exception:
            logger.warning("advisor_request_failed", exc_info=True)
            return FALLBACK_MESSAGE

        text = (text or "").strip()
        if not text:
            logger.info("advisor_empty_reply")
            return EMPTY_REPLY_MESSAGE
        return text

    # ------------------------------------------------------------------
    # OpenAI
    # ------------------------------------------------------------------

    async def _ask_openai(self, system: str, prompt: str) -> str | None:
        """Use the OpenAI chat completions API."""
        from openai import AsyncOpenAI

        if self._openai_client is None:
            self._openai_client = AsyncOpenAI(api_key=self._settings.openai_api_key)

        client: AsyncOpenAI = self._openai_client  # type: ignore[assignment]
        response = await client.chat.completions.create(
            model=self._settings.default_model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            temperature=self._settings.advisor_temperature,
            top_p=self._settings.advisor_top_p,
            max_tokens=self._settings.advisor_max_tokens,
        )
        return response.choices[0].message.content

    # ------------------------------------------------------------------
    # Anthropic
    # ------------------------------------------------------------------

    async def _ask_anthropic(self, system: str, prompt: str) -> str | None:
        """Use the Anthropic messages API."""
        from anthropic import AsyncAnthropic

        if self._anthropic_client is None:
            self._anthropic_client = AsyncAnthropic(
                api_key=self._settings.anthropic_api_key
            )

        client: AsyncAnthropic = self._anthropic_client  # type: ignore[assignment]
        response = await client.messages.create(
            model=self._settings.anthropic_model,
            max_tokens=self._settings.advisor_max_tokens,
            temperature=self._settings.advisor_temperature,
            system=system,
            messages=[{"role": "user", "content": prompt}],
        )
        return response.content[0].text if response.content else None
