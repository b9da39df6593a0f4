from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Sequence

import aisuite as ai  # type: ignore
import google.generativeai as genai  # type: ignore
from fastapi import HTTPException, status

from traveladvisor.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class ProviderNotConfigured(RuntimeError):
    """No text-generation provider has a credential configured."""


class TextGenerator(ABC):
    """A generative-text backend: prompt in, free-form text out. No structured-output guarantee."""

    name: str = "generator"

    @classmethod
    @abstractmethod
    def from_settings(cls, settings: Settings) -> TextGenerator | None:
        """Build the provider, or return None when its credential is missing."""

    @abstractmethod
    def generate(self, prompt: str, temperature: float = 0.7) -> str:
        """Single attempt; transport errors propagate to the caller."""

    async def generate_async(self, prompt: str, temperature: float = 0.7) -> str:
        # SDK calls are blocking; keep them off the event loop
        return await asyncio.to_thread(self.generate, prompt, temperature)


class GeminiProvider(TextGenerator):
    name = "gemini"

    def __init__(self, api_key: str, model: str) -> None:
        genai.configure(api_key=api_key)
        self.model = model
        self._genai_model = genai.GenerativeModel(model)

    @classmethod
    def from_settings(cls, settings: Settings) -> GeminiProvider | None:
        if not settings.gemini_api_key:
            return None
        return cls(settings.gemini_api_key, settings.gemini_model)

    def generate(self, prompt: str, temperature: float = 0.7) -> str:
        response = self._genai_model.generate_content(
            prompt,
            generation_config={"temperature": temperature},
        )
        return response.text or ""


class GroqProvider(TextGenerator):
    name = "groq"

    def __init__(self, api_key: str, model: str) -> None:
        self.model = model
        try:
            self._client = ai.Client(provider_configs={"groq": {"api_key": api_key}})
        except Exception as exc:  # fail fast if aisuite cannot initialize
            raise RuntimeError("Failed to initialize aisuite client") from exc

    @classmethod
    def from_settings(cls, settings: Settings) -> GroqProvider | None:
        if not settings.groq_api_key:
            return None
        return cls(settings.groq_api_key, settings.groq_model)

    def generate(self, prompt: str, temperature: float = 0.7) -> str:
        resp = self._client.chat.completions.create(
            model=f"groq:{self.model}",
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
        )
        return resp.choices[0].message.content or ""


# First configured provider wins
DEFAULT_PROVIDERS: tuple[type[TextGenerator], ...] = (GeminiProvider, GroqProvider)


def select_provider(
    settings: Settings | None = None,
    candidates: Sequence[type[TextGenerator]] = DEFAULT_PROVIDERS,
) -> TextGenerator:
    """
    Pick the text-generation provider.

    Args:
        settings: Credentials source (defaults to the environment)
        candidates: Provider classes in priority order

    Raises:
        ProviderNotConfigured: none of the candidates has a credential
    """
    settings = settings or get_settings()
    for candidate in candidates:
        provider = candidate.from_settings(settings)
        if provider is not None:
            logger.debug(f"[LLM] Using provider '{provider.name}'")
            return provider
    names = ", ".join(c.name for c in candidates)
    raise ProviderNotConfigured(f"No text-generation provider configured (tried: {names})")


def get_text_generator() -> TextGenerator:
    """FastAPI dependency resolving the configured provider."""
    try:
        return select_provider()
    except ProviderNotConfigured as exc:
        logger.error(f"[LLM] {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="No text-generation provider configured",
        )


def get_optional_text_generator() -> TextGenerator | None:
    """Like get_text_generator, but lets enrichment endpoints degrade instead of failing."""
    try:
        return select_provider()
    except ProviderNotConfigured as exc:
        logger.warning(f"[LLM] {exc}")
        return None
