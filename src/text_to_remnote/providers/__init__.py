"""Language model providers."""

from .base import ErrorKind, FlashcardProvider, GenerationResult
from .claude_provider import ClaudeProvider
from .factory import create_provider
from .openai_provider import OpenAIProvider

__all__ = [
    "ClaudeProvider",
    "ErrorKind",
    "FlashcardProvider",
    "GenerationResult",
    "OpenAIProvider",
    "create_provider",
]
