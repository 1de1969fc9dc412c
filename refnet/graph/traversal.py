"""Breadth-first traversal primitives over the referral graph.

All functions take the raw ``DiGraph`` and walk outgoing edges only. Each
node is visited at most once; nothing is cached between calls.
"""

from __future__ import annotations

import networkx as nx


def is_reachable(graph: nx.DiGraph, start: str, target: str) -> bool:
    """True if ``start == target`` or a directed path start → target exists.

    Stops as soon as the BFS discovers ``target``.
    """
    if start == target:
        return True
    if start not in graph or target not in graph:
        return False
    for _, node in nx.bfs_edges(graph, start):
        if node == target:
            return True
    return False


def reach_set(graph: nx.DiGraph, user_id: str) -> set[str]:
    """Every user downstream of ``user_id``, excluding the user itself."""
    if user_id not in graph:
        return set()
    return {node for _, node in nx.bfs_edges(graph, user_id)}


def hop_distances(graph: nx.DiGraph, source: str) -> dict[str, int]:
    """Shortest hop count from ``source`` to every node it can reach.

    The source maps to 0. Unreachable nodes are absent from the result.
    """
    if source not in graph:
        return {}
    return dict(nx.single_source_shortest_path_length(graph, source))
