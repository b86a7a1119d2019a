"""Turn canonical cards into note host nodes."""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..host.base import NodeHost, NodeRef
from ..models import CanonicalCard, CardType

logger = logging.getLogger(__name__)

# {{c1::term}} -> {{term}}
NUMBERED_CLOZE_RE = re.compile(r"\{\{c\d+::(.*?)\}\}")

SEPARATORS = {
    CardType.BASIC: " >> ",
    CardType.BASIC_REVERSE: " <> ",
    CardType.DESCRIPTOR: " ;; ",
}

LIST_SUFFIX = " >>>"


def normalize_cloze(text: str) -> str:
    """Rewrite numbered deletions into the host's bare {{...}} form."""
    return NUMBERED_CLOZE_RE.sub(r"{{\1}}", text)


def card_markup(card: CanonicalCard) -> Optional[str]:
    """Markup for single-node card types. None for list cards and unknown types."""
    if card.type == CardType.CLOZE:
        return normalize_cloze(card.cloze_text) if card.cloze_text else None

    separator = SEPARATORS.get(card.type)
    if separator is None:
        return None
    return f"{card.front}{separator}{card.back}"


@dataclass
class RenderSummary:
    """Outcome of rendering a batch of cards."""

    created: int = 0
    skipped: int = 0
    refs: list[NodeRef] = field(default_factory=list)  # top-level node per created card

    @property
    def total(self) -> int:
        return self.created + self.skipped


class CardRenderer:
    """Render cards one at a time through a NodeHost."""

    def __init__(self, host: NodeHost):
        self.host = host

    async def _render_list(self, card: CanonicalCard, parent: Optional[NodeRef]) -> list[NodeRef]:
        items = card.back if isinstance(card.back, list) else [card.back]

        list_ref = await self.host.create_node(f"{card.front}{LIST_SUFFIX}", parent)
        if list_ref is None:
            # No parent, no children: the whole card is abandoned
            logger.warning("Could not create list card %r", card.front)
            return []

        refs = [list_ref]
        for item in items:
            child_ref = await self.host.create_node(item, list_ref)
            if child_ref is None:
                logger.warning("Could not create list item %r under %r", item, card.front)
                continue
            refs.append(child_ref)
        return refs

    async def render(self, card: CanonicalCard, parent: Optional[NodeRef] = None) -> list[NodeRef]:
        """
        Create the host node(s) for a single card.

        Args:
            card: Card to render
            parent: Node to create the card under (None = host root)

        Returns:
            Created references, the card's top-level node first.
            Empty if nothing was created.
        """
        if card.type == CardType.LIST:
            return await self._render_list(card, parent)

        markup = card_markup(card)
        if markup is None:
            logger.warning("Skipping card with unsupported type or content: %r", card.type)
            return []

        ref = await self.host.create_node(markup, parent)
        if ref is None:
            logger.warning("Host did not create a node for %s card", card.type.value)
            return []
        return [ref]

    async def create_flashcards(
        self,
        cards: Iterable[CanonicalCard],
        parent: Optional[NodeRef] = None,
    ) -> RenderSummary:
        """
        Render a batch in order, continuing past cards that fail.

        Args:
            cards: Cards to render
            parent: Node to create every card under

        Returns:
            RenderSummary with created and skipped counts
        """
        summary = RenderSummary()
        for card in cards:
            try:
                refs = await self.render(card, parent)
            except Exception:
                logger.exception("Failed to create card: %s", card.get_display_text())
                refs = []

            if refs:
                summary.created += 1
                summary.refs.append(refs[0])
            else:
                summary.skipped += 1
        return summary


async def get_or_create_folder(host: NodeHost, name: str) -> Optional[NodeRef]:
    """
    Find the destination grouping node by name, creating it if missing.

    Args:
        host: Note host
        name: Folder name

    Returns:
        Reference to the folder, or None if the host could not create it
    """
    existing = await host.find_by_name(name)
    if existing is not None:
        return existing

    folder_ref = await host.create_node(f"# {name}")
    if folder_ref is not None:
        await host.set_as_container(folder_ref)
    else:
        logger.warning("Could not create folder %r", name)
    return folder_ref
