"""Tests for the in-memory outline host."""

import asyncio
import tempfile
from pathlib import Path

from text_to_remnote.host import NodeHost, OutlineHost


def build_outline() -> tuple[OutlineHost, str]:
    host = OutlineHost()

    async def build():
        folder = await host.create_node("# Biology")
        await host.set_as_container(folder)
        await host.create_node("Cell >> Unit of life", folder)
        items = await host.create_node("Organelles >>>", folder)
        await host.create_node("Nucleus", items)
        await host.create_node("Ribosome", items)
        return folder

    return host, asyncio.run(build())


class TestOutlineHost:
    """Tests for OutlineHost."""

    def test_is_node_host(self):
        assert isinstance(OutlineHost(), NodeHost)

    def test_ids_sequential(self):
        host = OutlineHost()
        first = asyncio.run(host.create_node("a"))
        second = asyncio.run(host.create_node("b"))

        assert (first, second) == ("node-1", "node-2")

    def test_unknown_parent(self):
        host = OutlineHost()
        assert asyncio.run(host.create_node("orphan", "node-99")) is None
        assert host.nodes == {}

    def test_find_by_name(self):
        host, folder = build_outline()

        assert asyncio.run(host.find_by_name("Biology")) == folder
        assert asyncio.run(host.find_by_name("Chemistry")) is None

    def test_find_ignores_plain_nodes(self):
        """Only container nodes are folders."""
        host = OutlineHost()
        asyncio.run(host.create_node("# Biology"))
        assert asyncio.run(host.find_by_name("Biology")) is None

    def test_to_markdown(self):
        host, _ = build_outline()

        assert host.to_markdown() == (
            "# Biology\n"
            "\n"
            "- Cell >> Unit of life\n"
            "- Organelles >>>\n"
            "  - Nucleus\n"
            "  - Ribosome\n"
        )

    def test_empty(self):
        assert OutlineHost().to_markdown() == ""

    def test_write(self):
        host, _ = build_outline()
        with tempfile.TemporaryDirectory() as tmpdir:
            path = host.write(Path(tmpdir) / "out" / "biology.md")

            assert path.exists()
            assert path.read_text(encoding="utf-8").startswith("# Biology")
