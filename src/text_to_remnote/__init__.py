"""Text to RemNote - Create flashcards from text using a language model."""

__version__ = "0.1.0"

from .config import SettingsStore, resolve_settings
from .exceptions import (
    ConfigurationError,
    FlashcardError,
    NoValidCardsError,
    ProviderError,
    TextValidationError,
)
from .exporter import AnkiExporter, export_cards_to_json, load_cards_from_json
from .generator import build_prompt, parse_response, parse_response_outcome
from .host import NodeHost, OutlineHost
from .models import CanonicalCard, CardType, GenerationSettings, Provider
from .parser import preprocess_text, read_document, validate_text
from .pipeline import GenerationReport, run_generation
from .providers import create_provider
from .renderer import CardRenderer, RenderSummary

__all__ = [
    # Prompt and response
    "build_prompt",
    "parse_response",
    "parse_response_outcome",
    # Rendering
    "CardRenderer",
    "RenderSummary",
    "NodeHost",
    "OutlineHost",
    # Pipeline
    "GenerationReport",
    "run_generation",
    "create_provider",
    # Input
    "preprocess_text",
    "read_document",
    "validate_text",
    # Config
    "SettingsStore",
    "resolve_settings",
    # Export
    "AnkiExporter",
    "export_cards_to_json",
    "load_cards_from_json",
    # Models
    "CanonicalCard",
    "CardType",
    "GenerationSettings",
    "Provider",
    # Errors
    "ConfigurationError",
    "FlashcardError",
    "NoValidCardsError",
    "ProviderError",
    "TextValidationError",
]
