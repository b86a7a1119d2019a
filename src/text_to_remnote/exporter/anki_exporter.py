"""Export canonical cards to Anki .apkg format."""

import hashlib
import json
import re
from pathlib import Path

import genanki

from ..generator.response_parser import parse_response
from ..models import CanonicalCard, CardType

# CSS styling for cards
CARD_CSS = """
.card {
    font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif;
    font-size: 18px;
    text-align: left;
    color: #1a1a1a;
    background-color: #ffffff;
    padding: 20px;
    line-height: 1.5;
}

.back {
    border-top: 1px solid #e0e0e0;
    padding-top: 20px;
}

.cloze {
    font-weight: bold;
    color: #0066cc;
}

.night_mode .card {
    background-color: #1e1e1e;
    color: #e0e0e0;
}

.night_mode .cloze {
    color: #66b3ff;
}
"""

QA_FRONT = '<div class="front">{{Front}}</div>'
QA_BACK = '{{FrontSide}}<hr id="answer"><div class="back">{{Back}}</div>'

REVERSE_FRONT = '<div class="front">{{Back}}</div>'
REVERSE_BACK = '{{FrontSide}}<hr id="answer"><div class="back">{{Front}}</div>'

CLOZE_TEMPLATE = '<div class="cloze-text">{{cloze:Text}}</div>'

NUMBERED_CLOZE_RE = re.compile(r"\{\{c(\d+)::")
BARE_CLOZE_RE = re.compile(r"\{\{(?!c\d+::)(.*?)\}\}")


def generate_model_id(name: str) -> int:
    """Generate a stable model ID from a name."""
    hash_bytes = hashlib.md5(name.encode()).digest()
    return int.from_bytes(hash_bytes[:4], byteorder="big")


def generate_deck_id(name: str) -> int:
    """Generate a stable deck ID from a name."""
    hash_bytes = hashlib.md5(f"deck_{name}".encode()).digest()
    return int.from_bytes(hash_bytes[:4], byteorder="big")


def to_anki_cloze(text: str) -> str:
    """Number bare {{term}} deletions as {{cN::term}}, after any existing numbers."""
    existing = [int(n) for n in NUMBERED_CLOZE_RE.findall(text)]
    counter = max(existing, default=0)

    def _number(match: re.Match) -> str:
        nonlocal counter
        counter += 1
        return f"{{{{c{counter}::{match.group(1)}}}}}"

    return BARE_CLOZE_RE.sub(_number, text)


def format_list_back(items: list[str]) -> str:
    """Render list items as an HTML list."""
    return "<ul>" + "".join(f"<li>{item}</li>" for item in items) + "</ul>"


def create_qa_model(deck_name: str, include_reverse: bool = False) -> genanki.Model:
    """Create the Q&A note model, optionally with a reverse template."""
    model_name = f"{deck_name} - Q&A (Reverse)" if include_reverse else f"{deck_name} - Q&A"
    templates = [{"name": "Card 1", "qfmt": QA_FRONT, "afmt": QA_BACK}]
    if include_reverse:
        templates.append({"name": "Card 2 (Reverse)", "qfmt": REVERSE_FRONT, "afmt": REVERSE_BACK})

    return genanki.Model(
        generate_model_id(model_name),
        model_name,
        fields=[{"name": "Front"}, {"name": "Back"}],
        templates=templates,
        css=CARD_CSS,
    )


def create_cloze_model(deck_name: str) -> genanki.Model:
    """Create the Cloze note model."""
    model_name = f"{deck_name} - Cloze"
    return genanki.Model(
        generate_model_id(model_name),
        model_name,
        model_type=genanki.Model.CLOZE,
        fields=[{"name": "Text"}],
        templates=[{"name": "Cloze", "qfmt": CLOZE_TEMPLATE, "afmt": CLOZE_TEMPLATE}],
        css=CARD_CSS,
    )


class AnkiExporter:
    """Export a batch of canonical cards to an Anki deck."""

    def __init__(self, deck_name: str):
        """
        Initialize the exporter.

        Args:
            deck_name: Name for the Anki deck
        """
        self.deck_name = deck_name
        self.deck = genanki.Deck(generate_deck_id(deck_name), deck_name)
        self.qa_model = create_qa_model(deck_name)
        self.reverse_model = create_qa_model(deck_name, include_reverse=True)
        self.cloze_model = create_cloze_model(deck_name)

    def card_to_note(self, card: CanonicalCard) -> genanki.Note:
        """Convert a canonical card to an Anki note."""
        tags = [f"type::{card.type.value}"]

        if card.type == CardType.CLOZE:
            return genanki.Note(
                model=self.cloze_model,
                fields=[to_anki_cloze(card.cloze_text or "")],
                tags=tags,
            )

        if isinstance(card.back, list):
            back = format_list_back(card.back)
        else:
            back = card.back

        model = self.reverse_model if card.type == CardType.BASIC_REVERSE else self.qa_model
        return genanki.Note(model=model, fields=[card.front, back], tags=tags)

    def add_card(self, card: CanonicalCard) -> None:
        """Add a single card to the deck."""
        self.deck.add_note(self.card_to_note(card))

    def add_cards(self, cards: list[CanonicalCard]) -> int:
        """
        Add a batch of cards to the deck.

        Returns:
            Number of cards added
        """
        for card in cards:
            self.add_card(card)
        return len(cards)

    def export(self, output_path: str | Path) -> Path:
        """
        Export the deck to an .apkg file.

        Args:
            output_path: Path for the output file

        Returns:
            Path to the created file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        genanki.Package(self.deck).write_to_file(str(output_path))
        return output_path


def export_cards_to_json(cards: list[CanonicalCard], output_path: str | Path) -> Path:
    """
    Save a batch of cards as a JSON array, in the same shape the model returns.

    Args:
        cards: Cards to save
        output_path: Path for the JSON file

    Returns:
        Path to the created file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [card.to_payload() for card in cards]
    output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return output_path


def load_cards_from_json(input_path: str | Path) -> list[CanonicalCard]:
    """
    Load cards from a saved batch or a raw model reply.

    The file goes through the same parsing and validation as a live reply,
    so invalid entries are dropped.
    """
    return parse_response(Path(input_path).read_text(encoding="utf-8"))
