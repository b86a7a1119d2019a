"""In-memory note host that can be saved as a Markdown outline."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class OutlineNode:
    """A single node in the outline."""

    id: str
    text: str
    parent_id: Optional[str] = None
    is_container: bool = False
    children: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        """Node text without Markdown heading markers."""
        return self.text.lstrip("#").strip()


class OutlineHost:
    """
    Note host that keeps nodes in memory.

    Nodes are created in call order and keep their parent links, so the
    outline reads exactly as the renderer produced it. Call write() to save
    it as an indented Markdown outline that note apps can import.
    """

    def __init__(self):
        self.nodes: dict[str, OutlineNode] = {}
        self.roots: list[str] = []
        self._next_id = 1

    async def create_node(self, markup: str, parent: Optional[str] = None) -> Optional[str]:
        if parent is not None and parent not in self.nodes:
            logger.warning("Cannot create node under unknown parent %s", parent)
            return None

        node_id = f"node-{self._next_id}"
        self._next_id += 1
        self.nodes[node_id] = OutlineNode(id=node_id, text=markup, parent_id=parent)

        if parent is None:
            self.roots.append(node_id)
        else:
            self.nodes[parent].children.append(node_id)
        return node_id

    async def set_as_container(self, ref: str) -> None:
        self.nodes[ref].is_container = True

    async def find_by_name(self, name: str) -> Optional[str]:
        wanted = name.strip()
        for node_id in self.roots:
            node = self.nodes[node_id]
            if node.is_container and node.name == wanted:
                return node_id
        return None

    def children_of(self, ref: str) -> list[OutlineNode]:
        """Direct children of a node, in creation order."""
        return [self.nodes[child] for child in self.nodes[ref].children]

    def _render(self, node_id: str, depth: int, lines: list[str]) -> None:
        node = self.nodes[node_id]
        lines.append(f"{'  ' * depth}- {node.text}")
        for child in node.children:
            self._render(child, depth + 1, lines)

    def to_markdown(self) -> str:
        """Render the whole outline. Containers become headings."""
        sections: list[str] = []
        for node_id in self.roots:
            node = self.nodes[node_id]
            lines: list[str] = []
            if node.is_container:
                heading = node.text if node.text.startswith("#") else f"# {node.text}"
                lines.append(heading)
                lines.append("")
                for child in node.children:
                    self._render(child, 0, lines)
            else:
                self._render(node_id, 0, lines)
            sections.append("\n".join(lines))
        return "\n\n".join(sections) + "\n" if sections else ""

    def write(self, output_path: str | Path) -> Path:
        """
        Write the outline to a Markdown file.

        Args:
            output_path: Path for the output file

        Returns:
            Path to the created file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.to_markdown(), encoding="utf-8")
        return output_path
