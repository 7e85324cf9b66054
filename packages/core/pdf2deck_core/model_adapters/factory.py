"""Construct the model adapter from process settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pdf2deck_core.errors import ConfigurationError
from pdf2deck_core.model_adapters.base import BaseModelAdapter
from pdf2deck_core.model_adapters.google import DEFAULT_MODEL, GoogleAdapter

if TYPE_CHECKING:
    from pdf2deck_core.settings import Settings


def build_model_adapter(settings: Settings) -> BaseModelAdapter:
    """Create the Gemini adapter configured by ``settings``.

    Raises:
        ConfigurationError: If no API key is configured
    """
    api_key = (settings.google_api_key or "").strip()
    if not api_key:
        raise ConfigurationError(
            "Missing API key: set GOOGLE_API_KEY in the environment or .env file"
        )

    return GoogleAdapter(
        api_key=api_key,
        model=settings.model_name.strip() or DEFAULT_MODEL,
        timeout=settings.ai_timeout,
        max_retries=settings.ai_max_attempts,
        narration_language=settings.narration_language,
    )
