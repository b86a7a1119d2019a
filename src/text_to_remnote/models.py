"""Data models for the text to flashcard pipeline."""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Open delimiter of a cloze deletion, in both "{{X}}" and "{{c1::X}}" forms
CLOZE_MARKER = "{{"

DEFAULT_API_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4"
DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_CARDS = 10
DEFAULT_TARGET_FOLDER = "AI Generated Flashcards"


class CardType(str, Enum):
    """The closed set of card types the note host understands."""

    BASIC = "basic"  # front >> back
    BASIC_REVERSE = "basic-reverse"  # front <> back
    CLOZE = "cloze"  # text with {{deletions}}
    LIST = "list"  # front >>> with one child per item
    DESCRIPTOR = "descriptor"  # attribute ;; value


class CardShape(str, Enum):
    """Structural shape of a card type's payload."""

    PAIR = "pair"
    LIST = "list"
    CLOZE = "cloze"


class Provider(str, Enum):
    """Supported language model providers."""

    OPENAI = "openai"
    CLAUDE = "claude"


PROVIDER_DEFAULT_MODELS = {
    Provider.OPENAI: DEFAULT_MODEL,
    Provider.CLAUDE: DEFAULT_CLAUDE_MODEL,
}

DEFAULT_CARD_TYPES = (CardType.BASIC, CardType.CLOZE, CardType.LIST)


class CardTypeDescriptor(BaseModel):
    """Static description of a card type, used to build prompts."""

    model_config = ConfigDict(frozen=True)

    card_type: CardType
    label: str = Field(description="Human-readable name")
    shape: CardShape
    purpose: str = Field(description="When to use this card type")
    format_hint: str = Field(description="Exact JSON shape the model must produce")
    example: dict[str, Any] = Field(description="Worked example payload")


class CanonicalCard(BaseModel):
    """A validated, normalized flashcard ready to be rendered."""

    model_config = ConfigDict(populate_by_name=True)

    type: CardType
    front: str = Field(default="", description="Question, prompt or attribute name")
    back: Union[str, list[str]] = Field(
        default="", description="Answer text, or the ordered items of a list card"
    )
    cloze_text: Optional[str] = Field(
        default=None, alias="clozeText", description="Full sentence with {{deletions}}"
    )

    @model_validator(mode="after")
    def _check_shape(self) -> "CanonicalCard":
        if self.type == CardType.LIST:
            if not isinstance(self.back, list):
                raise ValueError("list cards need a list of back items")
        elif isinstance(self.back, list):
            raise ValueError(f"{self.type.value} cards need a text back")

        if self.type == CardType.CLOZE:
            if not self.cloze_text or CLOZE_MARKER not in self.cloze_text:
                raise ValueError("cloze cards need clozeText with a {{deletion}}")
        return self

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON form, using the same keys the model is asked for."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def get_display_text(self) -> str:
        """Get human-readable card content."""
        if self.type == CardType.CLOZE:
            return f"Cloze: {self.cloze_text}"
        if isinstance(self.back, list):
            return f"Q: {self.front}\nA: " + "; ".join(self.back)
        return f"Q: {self.front}\nA: {self.back}"


class GenerationSettings(BaseModel):
    """Settings for one generation run. Resolved once, never mutated."""

    model_config = ConfigDict(frozen=True)

    provider: Provider = Field(default=Provider.OPENAI)
    api_key: str = Field(default="", repr=False)
    model: str = Field(default=DEFAULT_MODEL, description="Model identifier")
    api_url: str = Field(default=DEFAULT_API_URL, description="Base endpoint URL")
    max_cards: int = Field(default=DEFAULT_MAX_CARDS, ge=1, description="Requested card limit")
    enabled_card_types: tuple[CardType, ...] = Field(default=DEFAULT_CARD_TYPES, min_length=1)
    target_folder: str = Field(
        default=DEFAULT_TARGET_FOLDER, description="Name of the destination grouping node"
    )
    enforce_max_cards: bool = Field(
        default=False, description="Truncate the parsed batch to max_cards"
    )

    @model_validator(mode="before")
    @classmethod
    def _default_model_for_provider(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("model"):
            provider = data.get("provider") or Provider.OPENAI
            data = {**data, "model": PROVIDER_DEFAULT_MODELS.get(provider, DEFAULT_MODEL)}
        return data

    def safe_dump(self) -> dict[str, Any]:
        """Return settings with the API key redacted for display or logging."""
        data = self.model_dump(mode="json")
        if data["api_key"]:
            data["api_key"] = "***REDACTED***"
        return data
