"""Parse a model's reply into canonical flashcards."""

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..models import CLOZE_MARKER, CanonicalCard, CardType

logger = logging.getLogger(__name__)

JSON_BLOCK_RE = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)
TRAILING_COMMA_RE = re.compile(r",\s*([\]}])")

VALID_TYPES = frozenset(t.value for t in CardType)


class ParseStatus(str, Enum):
    """Outcome of parsing a model reply."""

    OK = "ok"
    MALFORMED = "malformed"


@dataclass
class ParseOutcome:
    """Result of normalizing one model reply."""

    status: ParseStatus
    cards: list[CanonicalCard] = field(default_factory=list)
    reason: Optional[str] = None
    raw_count: int = 0  # elements in the parsed array
    dropped: int = 0  # elements rejected by is_valid_card

    @property
    def produced_nothing(self) -> bool:
        """The model returned a well-formed but empty array."""
        return self.status == ParseStatus.OK and self.raw_count == 0

    @classmethod
    def malformed(cls, reason: str) -> "ParseOutcome":
        return cls(status=ParseStatus.MALFORMED, reason=reason)


def extract_json_payload(response_text: str) -> str:
    """Return the inside of a ```json block, or the whole text if there is none."""
    match = JSON_BLOCK_RE.search(response_text)
    if match:
        return match.group(1)
    return response_text


def repair_trailing_commas(payload: str) -> str:
    """Drop a comma that directly precedes a closing ] or }."""
    return TRAILING_COMMA_RE.sub(r"\1", payload.strip())


def is_valid_card(raw: Any) -> bool:
    """Check that a parsed element has the structure its type requires."""
    if not isinstance(raw, dict):
        return False

    card_type = raw.get("type")
    if not isinstance(card_type, str) or card_type not in VALID_TYPES:
        return False

    if card_type == CardType.CLOZE.value:
        cloze_text = raw.get("clozeText")
        return isinstance(cloze_text, str) and CLOZE_MARKER in cloze_text

    if card_type == CardType.LIST.value:
        return isinstance(raw.get("front"), str) and isinstance(raw.get("back"), list)

    return isinstance(raw.get("front"), str) and isinstance(raw.get("back"), str)


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    # Numbers, booleans and nested values keep their JSON spelling
    return json.dumps(value, ensure_ascii=False)


def normalize_card(raw: dict[str, Any]) -> CanonicalCard:
    """Coerce an element that passed is_valid_card into a CanonicalCard."""
    card_type = CardType(raw["type"])

    if card_type == CardType.LIST:
        back: Any = [_to_text(item) for item in raw["back"]]
    else:
        back = _to_text(raw.get("back"))

    cloze_text = None
    if card_type == CardType.CLOZE and raw.get("clozeText") is not None:
        cloze_text = _to_text(raw["clozeText"])

    return CanonicalCard(
        type=card_type,
        front=_to_text(raw.get("front")),
        back=back,
        cloze_text=cloze_text,
    )


def parse_response_outcome(response_text: str) -> ParseOutcome:
    """
    Parse a model reply, reporting why nothing came out when nothing did.

    Never raises: any failure becomes a MALFORMED outcome and a log entry.

    Args:
        response_text: Raw text returned by the model

    Returns:
        ParseOutcome with the surviving cards in their original order
    """
    try:
        payload = repair_trailing_commas(extract_json_payload(response_text))

        try:
            parsed = json.loads(payload)
        except json.JSONDecodeError as e:
            outcome = ParseOutcome.malformed(f"invalid JSON: {e}")
        else:
            if not isinstance(parsed, list):
                outcome = ParseOutcome.malformed(
                    f"expected a JSON array, got {type(parsed).__name__}"
                )
            else:
                cards = [normalize_card(raw) for raw in parsed if is_valid_card(raw)]
                outcome = ParseOutcome(
                    status=ParseStatus.OK,
                    cards=cards,
                    raw_count=len(parsed),
                    dropped=len(parsed) - len(cards),
                )
    except Exception as e:
        logger.exception("Unexpected error while parsing model response")
        outcome = ParseOutcome.malformed(f"unexpected error: {e}")

    if outcome.status == ParseStatus.MALFORMED:
        logger.warning("Could not parse model response: %s", outcome.reason)
        logger.debug("Raw model response: %r", response_text)
    elif outcome.dropped:
        logger.info("Dropped %d of %d invalid card entries", outcome.dropped, outcome.raw_count)

    return outcome


def parse_response(response_text: str) -> list[CanonicalCard]:
    """Parse a model reply into canonical cards. Returns [] when nothing is usable."""
    return parse_response_outcome(response_text).cards
