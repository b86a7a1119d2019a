"""Tests for Anki and JSON export."""

import json
import tempfile
from pathlib import Path

import genanki

from text_to_remnote.exporter.anki_exporter import (
    AnkiExporter,
    create_cloze_model,
    create_qa_model,
    export_cards_to_json,
    format_list_back,
    generate_deck_id,
    generate_model_id,
    load_cards_from_json,
    to_anki_cloze,
)
from text_to_remnote.models import CanonicalCard, CardType


def create_test_card(
    card_type: CardType = CardType.BASIC,
    front: str = "Test question?",
    back="Test answer",
    cloze_text: str = None,
) -> CanonicalCard:
    """Helper to create test cards."""
    return CanonicalCard(type=card_type, front=front, back=back, cloze_text=cloze_text)


def create_mixed_batch() -> list[CanonicalCard]:
    return [
        create_test_card(front="Q1?", back="A1"),
        create_test_card(CardType.BASIC_REVERSE, front="France", back="Paris"),
        create_test_card(CardType.CLOZE, front="", back="", cloze_text="{{Paris}} is in {{France}}"),
        create_test_card(CardType.LIST, front="Colors", back=["Red", "Blue"]),
        create_test_card(CardType.DESCRIPTOR, front="Water", back="H2O"),
    ]


class TestIdGeneration:
    """Test stable ID generation."""

    def test_generate_model_id_stable(self):
        """Same name generates same ID."""
        assert generate_model_id("Test Model") == generate_model_id("Test Model")

    def test_generate_model_id_unique(self):
        """Different names generate different IDs."""
        assert generate_model_id("Model A") != generate_model_id("Model B")

    def test_deck_and_model_ids_differ(self):
        """A deck and a model with the same name get different IDs."""
        assert generate_deck_id("Biology") != generate_model_id("Biology")


class TestClozeConversion:
    """Tests for to_anki_cloze."""

    def test_bare_markers_numbered(self):
        assert to_anki_cloze("{{Paris}} is in {{France}}") == "{{c1::Paris}} is in {{c2::France}}"

    def test_numbered_untouched(self):
        assert to_anki_cloze("{{c1::Paris}} is in France") == "{{c1::Paris}} is in France"

    def test_numbering_continues(self):
        assert to_anki_cloze("{{c2::Paris}} is in {{France}}") == "{{c2::Paris}} is in {{c3::France}}"


def test_format_list_back():
    assert format_list_back(["Red", "Blue"]) == "<ul><li>Red</li><li>Blue</li></ul>"


class TestModels:
    """Test note model creation."""

    def test_qa_model(self):
        model = create_qa_model("Biology")

        assert model.name == "Biology - Q&A"
        assert [t["name"] for t in model.templates] == ["Card 1"]

    def test_reverse_model(self):
        model = create_qa_model("Biology", include_reverse=True)

        assert model.name == "Biology - Q&A (Reverse)"
        assert [t["name"] for t in model.templates] == ["Card 1", "Card 2 (Reverse)"]

    def test_cloze_model(self):
        model = create_cloze_model("Biology")

        assert model.name == "Biology - Cloze"
        assert model.model_type == genanki.Model.CLOZE


class TestAnkiExporter:
    """Tests for AnkiExporter."""

    def test_basic_note(self):
        exporter = AnkiExporter("Deck")
        note = exporter.card_to_note(create_test_card(front="Q?", back="A"))

        assert note.model is exporter.qa_model
        assert note.fields == ["Q?", "A"]
        assert note.tags == ["type::basic"]

    def test_reverse_note(self):
        exporter = AnkiExporter("Deck")
        note = exporter.card_to_note(create_test_card(CardType.BASIC_REVERSE))
        assert note.model is exporter.reverse_model

    def test_cloze_note(self):
        exporter = AnkiExporter("Deck")
        card = create_test_card(CardType.CLOZE, front="", back="", cloze_text="The {{sun}} is a star")
        note = exporter.card_to_note(card)

        assert note.model is exporter.cloze_model
        assert note.fields == ["The {{c1::sun}} is a star"]

    def test_list_note(self):
        exporter = AnkiExporter("Deck")
        note = exporter.card_to_note(create_test_card(CardType.LIST, front="Colors", back=["Red", "Blue"]))

        assert note.fields == ["Colors", "<ul><li>Red</li><li>Blue</li></ul>"]
        assert note.tags == ["type::list"]

    def test_export(self):
        exporter = AnkiExporter("Deck")
        assert exporter.add_cards(create_mixed_batch()) == 5

        with tempfile.TemporaryDirectory() as tmpdir:
            path = exporter.export(Path(tmpdir) / "deck.apkg")

            assert path.exists()
            assert path.stat().st_size > 0


class TestJsonExport:
    """Tests for the JSON batch file."""

    def test_round_trip(self):
        cards = create_mixed_batch()
        with tempfile.TemporaryDirectory() as tmpdir:
            path = export_cards_to_json(cards, Path(tmpdir) / "cards.json")

            assert load_cards_from_json(path) == cards

    def test_file_shape(self):
        cards = [create_test_card(CardType.CLOZE, front="", back="", cloze_text="{{x}} marks")]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = export_cards_to_json(cards, Path(tmpdir) / "cards.json")
            data = json.loads(path.read_text(encoding="utf-8"))

        assert data == [{"type": "cloze", "front": "", "back": "", "clozeText": "{{x}} marks"}]

    def test_load_raw_reply(self):
        """A saved model reply loads like a live one, invalid entries dropped."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "reply.txt"
            path.write_text(
                '```json\n[{"type": "basic", "front": "Q", "back": "A"}, {"type": "nope"},]\n```',
                encoding="utf-8",
            )
            cards = load_cards_from_json(path)

        assert len(cards) == 1
        assert cards[0].front == "Q"
