"""Provider factory."""

import logging
from typing import Any, Optional

from ..exceptions import ConfigurationError
from ..models import GenerationSettings, Provider
from .base import FlashcardProvider
from .claude_provider import ClaudeProvider
from .openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)

PROVIDER_MAP: dict[Provider, type[FlashcardProvider]] = {
    Provider.OPENAI: OpenAIProvider,
    Provider.CLAUDE: ClaudeProvider,
}


def create_provider(settings: GenerationSettings, client: Optional[Any] = None) -> FlashcardProvider:
    """
    Create the provider selected in settings.

    Args:
        settings: Resolved generation settings
        client: Optional pre-built SDK client, mainly for tests

    Returns:
        Initialized provider

    Raises:
        ConfigurationError: If the provider is not supported
    """
    provider_class = PROVIDER_MAP.get(settings.provider)
    if provider_class is None:
        available = ", ".join(p.value for p in PROVIDER_MAP)
        raise ConfigurationError(
            f"Unsupported provider: {settings.provider}. Available providers: {available}"
        )

    logger.debug("Creating %s provider with %s", provider_class.name, settings.safe_dump())
    return provider_class(settings, client=client)
