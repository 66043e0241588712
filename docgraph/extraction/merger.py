"""Merge partial graphs from the chunks of one document.

First write wins for both nodes (keyed by id) and links (keyed by
source, target and label). Fields of duplicates are not combined.
"""

from collections.abc import Iterable

from ..schema import Link, MergedGraph, Node, PartialGraph


def merge_graphs(graphs: Iterable[PartialGraph]) -> MergedGraph:
    """
    Deduplicate and validate partial graphs into one graph.

    Args:
        graphs: Partial graphs ordered by chunk index.

    Returns:
        MergedGraph preserving first-insertion order of nodes and links,
        with every link whose endpoint is missing dropped.
    """
    merged_nodes: dict[str, Node] = {}
    merged_links: dict[tuple[str, str, str], Link] = {}

    for graph in graphs:
        for node in graph.nodes:
            merged_nodes.setdefault(node.id, node)
        for link in graph.links:
            merged_links.setdefault(link.key, link)

    # Links may reference ids that only another chunk defined, or none did
    valid_links = [
        link
        for link in merged_links.values()
        if link.source_id in merged_nodes and link.target_id in merged_nodes
    ]

    return MergedGraph(nodes=list(merged_nodes.values()), links=valid_links)
