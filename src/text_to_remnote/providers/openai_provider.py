"""OpenAI (and OpenAI-compatible) chat completions provider."""

from typing import Any, Optional

import openai

from ..exceptions import ProviderError
from ..generator.prompts import SYSTEM_PROMPT
from ..models import DEFAULT_API_URL, GenerationSettings
from .base import EMPTY_RESPONSE_MESSAGE, MAX_TOKENS, TEMPERATURE, FlashcardProvider


class OpenAIProvider(FlashcardProvider):
    """Generate flashcards through the chat completions API."""

    name = "OpenAI"

    def __init__(self, settings: GenerationSettings, client: Optional[Any] = None):
        """
        Initialize the provider.

        Args:
            settings: Resolved generation settings
            client: Pre-built AsyncOpenAI-compatible client (built from settings if omitted)
        """
        super().__init__(settings)
        self.client = client or openai.AsyncOpenAI(
            api_key=settings.api_key,
            base_url=settings.api_url or DEFAULT_API_URL,
        )

    async def _complete(self, prompt: str) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.settings.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
            )
        except openai.APIStatusError as e:
            raise ProviderError(f"API request failed ({e.status_code}): {e.message}") from e
        except openai.OpenAIError as e:
            raise ProviderError(f"API request failed: {e}") from e

        if not response.choices:
            raise ProviderError(EMPTY_RESPONSE_MESSAGE)
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise ProviderError(EMPTY_RESPONSE_MESSAGE)
        return content
