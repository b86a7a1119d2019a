"""Base interface for flashcard generation providers."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Union

from ..exceptions import ProviderError
from ..generator.prompts import build_prompt
from ..generator.response_parser import ParseOutcome, parse_response_outcome
from ..models import CanonicalCard, CardType, GenerationSettings

logger = logging.getLogger(__name__)

NO_VALID_CARDS_MESSAGE = "No valid cards could be extracted from the model response"
EMPTY_RESPONSE_MESSAGE = "The model returned an empty response"

# Sampling settings shared by every provider
TEMPERATURE = 0.7
MAX_TOKENS = 4000


class ErrorKind(str, Enum):
    """Why a generation produced no cards."""

    TRANSPORT = "transport"
    NO_VALID_CARDS = "no_valid_cards"


@dataclass
class GenerationResult:
    """Cards from one provider call, or the reason there are none."""

    success: bool
    cards: list[CanonicalCard] = field(default_factory=list)
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    outcome: Optional[ParseOutcome] = None

    @classmethod
    def ok(cls, outcome: ParseOutcome) -> "GenerationResult":
        return cls(success=True, cards=list(outcome.cards), outcome=outcome)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        outcome: Optional[ParseOutcome] = None,
    ) -> "GenerationResult":
        return cls(success=False, error=message, error_kind=kind, outcome=outcome)


class FlashcardProvider(ABC):
    """
    A language model provider that turns text into flashcards.

    Subclasses only implement _complete(); prompt building and reply
    parsing are the same for every provider.
    """

    name = "provider"

    def __init__(self, settings: GenerationSettings):
        self.settings = settings

    @abstractmethod
    async def _complete(self, prompt: str) -> str:
        """
        Send the prompt and return the model's reply text.

        Raises:
            ProviderError: On transport or API failure, or an empty reply
        """

    async def generate(
        self,
        text: str,
        card_types: Iterable[Union[CardType, str]],
    ) -> GenerationResult:
        """
        Generate flashcards for already validated and preprocessed text.

        Args:
            text: Source text
            card_types: Card types to ask for

        Returns:
            GenerationResult; never raises for provider or parse failures
        """
        prompt = build_prompt(text, card_types, self.settings.max_cards)

        try:
            response_text = await self._complete(prompt)
        except ProviderError as e:
            logger.error("%s request failed: %s", self.name, e)
            return GenerationResult.failure(ErrorKind.TRANSPORT, str(e))

        outcome = parse_response_outcome(response_text)
        if not outcome.cards:
            if outcome.produced_nothing:
                logger.warning("%s returned an empty card list", self.name)
            return GenerationResult.failure(ErrorKind.NO_VALID_CARDS, NO_VALID_CARDS_MESSAGE, outcome)

        return GenerationResult.ok(outcome)
