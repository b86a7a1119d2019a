"""Contract for the note host that stores rendered cards."""

from typing import Any, Optional, Protocol, runtime_checkable

# Opaque reference to a node, owned by the host
NodeRef = Any


@runtime_checkable
class NodeHost(Protocol):
    """The only host operations the renderer relies on."""

    async def create_node(self, markup: str, parent: Optional[NodeRef] = None) -> Optional[NodeRef]:
        """Create a node from markup, under parent if given. None on failure."""
        ...

    async def set_as_container(self, ref: NodeRef) -> None:
        """Mark a node as a top-level grouping (document) node."""
        ...

    async def find_by_name(self, name: str) -> Optional[NodeRef]:
        """Find an existing grouping node by name."""
        ...
