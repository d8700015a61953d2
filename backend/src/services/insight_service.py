"""AI market insight generated through an ordered list of text-generation providers."""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

import httpx

from models.base import utcnow
from models.preference import Preference
from services.exceptions import AllProvidersFailedError, UpstreamError
from services.gateway import request_json

logger = logging.getLogger(__name__)

UPSTREAM = "Hugging Face"

DEFAULT_ASSETS = "BTC, ETH"
DEFAULT_INVESTOR_TYPE = "General"
EMPTY_INSIGHT = "No insight returned."

SYSTEM_INSTRUCTION = (
    "You are a helpful crypto assistant. "
    "Return plain text only (no Markdown). "
    "Write 2-3 short sentences. "
    "End with: Risk note: <one short sentence>. "
    "No financial advice."
)


class InsightProvider(Protocol):
    """A text-generation backend for one model."""

    name: str

    async def generate(self, messages: list[dict[str, str]]) -> str:
        """Return generated text, or raise UpstreamError."""
        ...


@dataclass
class Insight:
    """A generated insight and the provider that produced it."""

    text: str
    model: str
    updated_at: datetime


class HuggingFaceChatProvider:
    """One model behind the Hugging Face router's chat-completions endpoint."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        token: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 180,
    ) -> None:
        self.name = model
        self._client = client
        self._url = url
        self._token = token
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def generate(self, messages: list[dict[str, str]]) -> str:
        """Send the chat to the router and return the first choice's text."""
        data = await request_json(
            self._client,
            "POST",
            self._url,
            upstream=UPSTREAM,
            headers={"Authorization": f"Bearer {self._token}"},
            json={
                "model": self.name,
                "messages": messages,
                "temperature": self._temperature,
                "max_tokens": self._max_tokens,
            },
        )
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return EMPTY_INSIGHT
        if not isinstance(content, str) or not content.strip():
            return EMPTY_INSIGHT
        return content.strip()


def build_messages(preference: Preference | None) -> list[dict[str, str]]:
    """Build the chat prompt from stored preferences, with defaults when unset."""
    assets = DEFAULT_ASSETS
    investor_type = DEFAULT_INVESTOR_TYPE
    if preference is not None:
        if preference.assets:
            assets = ", ".join(preference.assets)
        if preference.investor_type:
            investor_type = preference.investor_type

    return [
        {"role": "system", "content": SYSTEM_INSTRUCTION},
        {
            "role": "user",
            "content": (
                "Give today's crypto market insight tailored to: "
                f"InvestorType={investor_type}, Assets={assets}. Mention a risk note."
            ),
        },
    ]


class InsightService:
    """
    Tries each provider in order until one succeeds.

    No cache and no static fallback text: exhausting every provider is an error.
    """

    def __init__(self, providers: list[InsightProvider]) -> None:
        self._providers = providers

    @property
    def models(self) -> list[str]:
        """Names of the configured providers, in the order they are tried."""
        return [p.name for p in self._providers]

    async def generate(self, preference: Preference | None) -> Insight:
        """
        Generate an insight tailored to the user's preferences.

        Raises:
            AllProvidersFailedError: With every attempted model and the last failure.
        """
        messages = build_messages(preference)
        last_model: str | None = None
        last_error: UpstreamError | None = None

        for provider in self._providers:
            try:
                text = await provider.generate(messages)
            except UpstreamError as e:
                logger.warning("Insight provider %s failed: %s", provider.name, e)
                last_model = provider.name
                last_error = e
                continue
            return Insight(text=text, model=provider.name, updated_at=utcnow())

        raise AllProvidersFailedError(self.models, last_model, last_error)
