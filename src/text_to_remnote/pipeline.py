"""Run one generation batch: text in, host nodes out."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from .exceptions import ConfigurationError, NoValidCardsError, ProviderError
from .host.base import NodeHost, NodeRef
from .models import CanonicalCard, CardType, GenerationSettings
from .parser.document_parser import preprocess_text, validate_text
from .providers.base import ErrorKind, FlashcardProvider
from .providers.factory import create_provider
from .renderer.card_renderer import CardRenderer, RenderSummary, get_or_create_folder

logger = logging.getLogger(__name__)


@dataclass
class GenerationReport:
    """What a generation run produced."""

    cards: list[CanonicalCard] = field(default_factory=list)
    summary: RenderSummary = field(default_factory=RenderSummary)
    folder_ref: Optional[NodeRef] = None

    @property
    def created(self) -> int:
        return self.summary.created

    @property
    def skipped(self) -> int:
        return self.summary.skipped


def limit_cards(cards: list[CanonicalCard], settings: GenerationSettings) -> list[CanonicalCard]:
    """Apply max_cards to a parsed batch, only when enforce_max_cards is set."""
    if settings.enforce_max_cards and len(cards) > settings.max_cards:
        logger.info("Keeping the first %d of %d cards", settings.max_cards, len(cards))
        return cards[: settings.max_cards]
    return cards


async def generate_cards(
    text: str,
    settings: GenerationSettings,
    provider: Optional[FlashcardProvider] = None,
    card_types: Optional[Iterable[Union[CardType, str]]] = None,
) -> list[CanonicalCard]:
    """
    Validate text and ask the provider for cards, without touching a host.

    Args:
        text: Raw source text
        settings: Resolved settings
        provider: Provider to use (created from settings if omitted)
        card_types: Card types to request (default: settings.enabled_card_types)

    Returns:
        Parsed cards, limited by max_cards if enforce_max_cards is set

    Raises:
        TextValidationError: If the text is rejected
        ConfigurationError: If the API key is missing or no card type is requested
        ProviderError: If the provider call fails
        NoValidCardsError: If the reply contained no usable cards
    """
    validate_text(text)
    text = preprocess_text(text)

    types = list(card_types) if card_types is not None else list(settings.enabled_card_types)
    if not types:
        raise ConfigurationError("Select at least one card type")
    if not settings.api_key:
        raise ConfigurationError("Configure an API key first")

    if provider is None:
        provider = create_provider(settings)

    result = await provider.generate(text, types)
    if not result.success:
        message = result.error or "Generation failed"
        if result.error_kind == ErrorKind.NO_VALID_CARDS:
            raise NoValidCardsError(message)
        raise ProviderError(message)

    return limit_cards(result.cards, settings)


async def run_generation(
    text: str,
    settings: GenerationSettings,
    host: NodeHost,
    provider: Optional[FlashcardProvider] = None,
    card_types: Optional[Iterable[Union[CardType, str]]] = None,
) -> GenerationReport:
    """
    Generate cards from text and create them in the host's target folder.

    Args:
        text: Raw source text
        settings: Resolved settings
        host: Note host to create nodes in
        provider: Provider to use (created from settings if omitted)
        card_types: Card types to request (default: settings.enabled_card_types)

    Returns:
        GenerationReport with created and skipped counts

    Raises:
        TextValidationError, ConfigurationError, ProviderError, NoValidCardsError
    """
    cards = await generate_cards(text, settings, provider=provider, card_types=card_types)
    return await render_cards(cards, settings, host)


async def render_cards(
    cards: list[CanonicalCard],
    settings: GenerationSettings,
    host: NodeHost,
) -> GenerationReport:
    """Create already parsed cards in the host's target folder."""
    folder_ref = await get_or_create_folder(host, settings.target_folder)
    summary = await CardRenderer(host).create_flashcards(cards, folder_ref)

    logger.info("Created %d cards, skipped %d", summary.created, summary.skipped)
    return GenerationReport(cards=cards, summary=summary, folder_ref=folder_ref)
