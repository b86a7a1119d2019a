"""Tests for rendering cards into a note host."""

import asyncio
import logging
from typing import Optional

from text_to_remnote.host import OutlineHost
from text_to_remnote.models import CanonicalCard, CardType
from text_to_remnote.renderer import CardRenderer, get_or_create_folder, normalize_cloze
from text_to_remnote.renderer.card_renderer import card_markup


class RecordingHost(OutlineHost):
    """Outline host that records calls and can be told to fail."""

    def __init__(self, refuse: tuple[str, ...] = (), explode: tuple[str, ...] = ()):
        super().__init__()
        self.calls: list[tuple[str, Optional[str]]] = []
        self.refuse = refuse
        self.explode = explode

    async def create_node(self, markup, parent=None):
        self.calls.append((markup, parent))
        if markup in self.explode:
            raise RuntimeError("host crashed")
        if markup in self.refuse:
            return None
        return await super().create_node(markup, parent)


def create_test_card(card_type: CardType = CardType.BASIC, **kwargs) -> CanonicalCard:
    """Helper to create a test card."""
    defaults = {"front": "Question", "back": "Answer"}
    defaults.update(kwargs)
    return CanonicalCard(type=card_type, **defaults)


def render(host, cards, parent=None):
    return asyncio.run(CardRenderer(host).create_flashcards(cards, parent))


class TestNormalizeCloze:
    """Tests for cloze marker rewriting."""

    def test_numbered(self):
        assert normalize_cloze("X contains {{c1::Y}}") == "X contains {{Y}}"

    def test_several(self):
        text = "{{c1::Paris}} is the capital of {{c2::France}}"
        assert normalize_cloze(text) == "{{Paris}} is the capital of {{France}}"

    def test_bare_untouched(self):
        assert normalize_cloze("The {{sun}} is a star") == "The {{sun}} is a star"


class TestCardMarkup:
    """Tests for single-node markup."""

    def test_separators(self):
        assert card_markup(create_test_card(CardType.BASIC, front="Q", back="A")) == "Q >> A"
        assert card_markup(create_test_card(CardType.BASIC_REVERSE, front="Q", back="A")) == "Q <> A"
        assert card_markup(create_test_card(CardType.DESCRIPTOR, front="Q", back="A")) == "Q ;; A"

    def test_cloze(self):
        card = CanonicalCard(type=CardType.CLOZE, clozeText="X contains {{c1::Y}}")
        assert card_markup(card) == "X contains {{Y}}"

    def test_list_has_no_single_markup(self):
        card = create_test_card(CardType.LIST, back=["a"])
        assert card_markup(card) is None


class TestCardRenderer:
    """Tests for CardRenderer."""

    def test_single_node_cards(self):
        """Each non-list card is one node, in input order."""
        host = RecordingHost()
        cards = [
            create_test_card(CardType.BASIC, front="Q1", back="A1"),
            create_test_card(CardType.BASIC_REVERSE, front="Q2", back="A2"),
            CanonicalCard(type=CardType.CLOZE, clozeText="{{c1::Paris}} is in France"),
            create_test_card(CardType.DESCRIPTOR, front="Water", back="H2O"),
        ]
        summary = render(host, cards)

        assert [markup for markup, _ in host.calls] == [
            "Q1 >> A1",
            "Q2 <> A2",
            "{{Paris}} is in France",
            "Water ;; H2O",
        ]
        assert summary.created == 4
        assert summary.skipped == 0
        assert len(summary.refs) == 4

    def test_list_card(self):
        """A list card is a parent node plus one child per item, in order."""
        host = RecordingHost()
        card = create_test_card(CardType.LIST, front="Primary colors", back=["Red", "Green", "Blue"])
        summary = render(host, [card])

        assert len(host.calls) == 4
        assert host.calls[0] == ("Primary colors >>>", None)
        parent_ref = summary.refs[0]
        assert host.calls[1:] == [("Red", parent_ref), ("Green", parent_ref), ("Blue", parent_ref)]
        assert [node.text for node in host.children_of(parent_ref)] == ["Red", "Green", "Blue"]
        assert summary.created == 1

    def test_list_parent_failure_abandons_card(self):
        """No children are created when the list node fails."""
        host = RecordingHost(refuse=("Colors >>>",))
        card = create_test_card(CardType.LIST, front="Colors", back=["Red", "Blue"])
        summary = render(host, [card])

        assert host.calls == [("Colors >>>", None)]
        assert summary.created == 0
        assert summary.skipped == 1

    def test_list_child_failure_keeps_going(self):
        """A failed item is skipped and the rest are still created."""
        host = RecordingHost(refuse=("Green",))
        card = create_test_card(CardType.LIST, front="Colors", back=["Red", "Green", "Blue"])
        summary = render(host, [card])

        parent_ref = summary.refs[0]
        assert [node.text for node in host.children_of(parent_ref)] == ["Red", "Blue"]
        assert summary.created == 1

    def test_failing_card_skipped(self):
        """A card whose creation raises is skipped, the batch continues."""
        host = RecordingHost(explode=("Bad >> card",))
        cards = [
            create_test_card(front="Good", back="one"),
            create_test_card(front="Bad", back="card"),
            create_test_card(front="Good", back="two"),
        ]
        summary = render(host, cards)

        assert summary.created == 2
        assert summary.skipped == 1
        assert summary.total == 3
        assert len(host.calls) == 3

    def test_unknown_type_skipped(self, caplog):
        """A card of a type the renderer does not know is logged and skipped."""
        host = RecordingHost()
        card = CanonicalCard.model_construct(type="mystery", front="a", back="b", cloze_text=None)

        with caplog.at_level(logging.WARNING, logger="text_to_remnote.renderer.card_renderer"):
            summary = render(host, [card, create_test_card(front="Q", back="A")])

        assert summary.skipped == 1
        assert summary.created == 1
        assert host.calls == [("Q >> A", None)]
        assert any("mystery" in record.getMessage() for record in caplog.records)

    def test_refused_card_skipped(self):
        """A card the host refuses counts as skipped."""
        host = RecordingHost(refuse=("Q >> A",))
        summary = render(host, [create_test_card(front="Q", back="A")])

        assert summary.created == 0
        assert summary.skipped == 1

    def test_cards_created_under_parent(self):
        """Every top-level card node goes under the given parent."""
        host = RecordingHost()
        folder = asyncio.run(host.create_node("# Deck"))
        render(host, [create_test_card(), create_test_card(CardType.LIST, back=["a"])], folder)

        assert [node.text for node in host.children_of(folder)] == [
            "Question >> Answer",
            "Question >>>",
        ]


class TestGetOrCreateFolder:
    """Tests for folder lookup."""

    def test_creates_container(self):
        host = RecordingHost()
        ref = asyncio.run(get_or_create_folder(host, "AI Generated Flashcards"))

        assert host.calls == [("# AI Generated Flashcards", None)]
        assert host.nodes[ref].is_container

    def test_reuses_existing(self):
        host = RecordingHost()
        first = asyncio.run(get_or_create_folder(host, "Biology"))
        second = asyncio.run(get_or_create_folder(host, "Biology"))

        assert first == second
        assert len(host.calls) == 1

    def test_host_refuses(self):
        host = RecordingHost(refuse=("# Biology",))
        assert asyncio.run(get_or_create_folder(host, "Biology")) is None
