"""
Schema definitions for knowledge graph nodes, links and graphs.
"""

from .nodes import Node
from .edges import Link
from .graph import GraphMetadata, MergedGraph, PartialGraph, export_filename

__all__ = ["Node", "Link", "PartialGraph", "MergedGraph", "GraphMetadata", "export_filename"]
