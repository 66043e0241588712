"""
Knowledge graph containers and JSON export.
"""

import json
import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .nodes import Node
from .edges import Link

DEFAULT_EXPORT_NAME = "knowledge_graph"


class PartialGraph(BaseModel):
    """Nodes and links returned by one extraction call for one chunk."""

    nodes: list[Node] = Field(default_factory=list)
    links: list[Link] = Field(default_factory=list)


class GraphMetadata(BaseModel):
    """Provenance of a merged graph."""

    source: Optional[str] = None
    chunks_total: int = 0
    chunks_failed: int = 0


class MergedGraph(PartialGraph):
    """
    Deduplicated union of the partial graphs of one entry.

    Node ids are unique and every link references nodes of this graph.
    """

    metadata: GraphMetadata = Field(default_factory=GraphMetadata)

    def get_node(self, node_id: str) -> Optional[Node]:
        """Get a node by ID."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_node_links(self, node_id: str) -> list[Link]:
        """Get all links touching a node."""
        return [
            link
            for link in self.links
            if link.source_id == node_id or link.target_id == node_id
        ]

    def to_json(self, path: Path) -> None:
        """Save graph to JSON file."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, ensure_ascii=False, indent=2)

    @classmethod
    def from_json(cls, path: Path) -> "MergedGraph":
        """Load graph from JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.model_validate(data)

    def __len__(self) -> int:
        return len(self.nodes)

    def summary(self) -> str:
        """Return a summary of the graph."""
        return f"MergedGraph(nodes={len(self.nodes)}, links={len(self.links)})"


def export_filename(source: str) -> str:
    """
    Derive a JSON file name from an entry source.

    The last extension is dropped and everything that is not a letter or
    digit becomes an underscore.

    >>> export_filename("Moby Dick.txt")
    'moby_dick.json'
    """
    stem = ".".join(source.split(".")[:-1])
    stem = re.sub(r"[^a-z0-9]", "_", stem, flags=re.IGNORECASE).lower()
    return f"{stem or DEFAULT_EXPORT_NAME}.json"
