"""Errors raised by the flashcard generation pipeline."""


class FlashcardError(Exception):
    """Base class for every error surfaced to the caller as a hard stop."""


class TextValidationError(FlashcardError, ValueError):
    """Input text was rejected before any model call was made."""


class ConfigurationError(FlashcardError, ValueError):
    """Settings are missing or invalid."""


class DocumentError(FlashcardError):
    """A source document could not be turned into text."""


class UnsupportedDocumentError(DocumentError):
    """The document's file type is not supported."""


class DocumentParseError(DocumentError):
    """The document was read but no usable text came out of it."""


class ProviderError(FlashcardError):
    """The model provider failed or returned an empty completion."""


class NoValidCardsError(FlashcardError):
    """The model replied, but nothing usable could be extracted from the reply."""
