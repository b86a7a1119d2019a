"""Prompt building and response parsing."""

from .prompts import CARD_TYPE_DESCRIPTORS, SYSTEM_PROMPT, build_prompt
from .response_parser import ParseOutcome, ParseStatus, parse_response, parse_response_outcome

__all__ = [
    "CARD_TYPE_DESCRIPTORS",
    "SYSTEM_PROMPT",
    "build_prompt",
    "ParseOutcome",
    "ParseStatus",
    "parse_response",
    "parse_response_outcome",
]
