"""Anthropic Claude messages provider."""

from typing import Any, Optional

import anthropic

from ..exceptions import ProviderError
from ..generator.prompts import SYSTEM_PROMPT
from ..models import DEFAULT_API_URL, GenerationSettings
from .base import EMPTY_RESPONSE_MESSAGE, MAX_TOKENS, TEMPERATURE, FlashcardProvider

ANTHROPIC_API_URL = "https://api.anthropic.com"


def resolve_base_url(api_url: str) -> str:
    """Use the Anthropic endpoint unless a custom (non-OpenAI) URL is configured."""
    if not api_url or api_url.rstrip("/") == DEFAULT_API_URL:
        return ANTHROPIC_API_URL
    return api_url.rstrip("/")


class ClaudeProvider(FlashcardProvider):
    """Generate flashcards using Claude."""

    name = "Claude"

    def __init__(self, settings: GenerationSettings, client: Optional[Any] = None):
        """
        Initialize the provider.

        Args:
            settings: Resolved generation settings
            client: Pre-built AsyncAnthropic-compatible client (built from settings if omitted)
        """
        super().__init__(settings)
        self.model = settings.model
        self.client = client or anthropic.AsyncAnthropic(
            api_key=settings.api_key,
            base_url=resolve_base_url(settings.api_url),
        )

    async def _complete(self, prompt: str) -> str:
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=MAX_TOKENS,
                temperature=TEMPERATURE,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIStatusError as e:
            raise ProviderError(f"API request failed ({e.status_code}): {e.message}") from e
        except anthropic.AnthropicError as e:
            raise ProviderError(f"API request failed: {e}") from e

        # Safely extract response text
        if not response.content:
            raise ProviderError(EMPTY_RESPONSE_MESSAGE)
        content_block = response.content[0]
        text = getattr(content_block, "text", None)
        if not text or not text.strip():
            raise ProviderError(EMPTY_RESPONSE_MESSAGE)
        return text
