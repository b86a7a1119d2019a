"""Note host contract and implementations."""

from .base import NodeHost, NodeRef
from .outline import OutlineHost, OutlineNode

__all__ = ["NodeHost", "NodeRef", "OutlineHost", "OutlineNode"]
