"""
Dijkstra shortest path over a waypoint Graph.
"""

import logging
import math
from typing import Dict, List

from ...errors import NoPathError, NodeNotFoundError
from .graph import Graph
from .indexed_heap import IndexedMinHeap

logger = logging.getLogger(__name__)


def shortest_path(graph: Graph, start: int, end: int,
                  weight: str = 'weighted_length') -> List[int]:
    """
    Find the lowest-cost path from start to end.

    Edge weights must be non-negative. The search stops as soon as end is
    settled.

    Args:
        graph: Waypoint graph
        start: Starting node ID
        end: Ending node ID
        weight: Edge attribute to use for weights ('weighted_length' or 'length')

    Returns:
        Node IDs from start to end inclusive

    Raises:
        NodeNotFoundError: If start or end is not in the graph
        NoPathError: If end cannot be reached from start
    """
    if not graph.has_node(start):
        raise NodeNotFoundError(f"Start node {start} does not exist")
    if not graph.has_node(end):
        raise NodeNotFoundError(f"End node {end} does not exist")

    if start == end:
        return [start]

    distances: Dict[int, float] = {start: 0.0}
    predecessors: Dict[int, int] = {}
    settled = set()

    queue: IndexedMinHeap[int] = IndexedMinHeap()
    queue.push(start, 0.0)

    while queue:
        node, node_distance = queue.pop()
        settled.add(node)

        if node == end:
            break

        for neighbor, edge in graph.neighbors(node):
            if neighbor in settled:
                continue

            candidate = node_distance + getattr(edge, weight)
            if candidate < distances.get(neighbor, math.inf):
                distances[neighbor] = candidate
                predecessors[neighbor] = node

                if neighbor in queue:
                    queue.decrease_key(neighbor, candidate)
                else:
                    queue.push(neighbor, candidate)

    if end not in predecessors:
        raise NoPathError(f"No path exists from {start} to {end}")

    path = [end]
    while path[-1] != start:
        path.append(predecessors[path[-1]])
    path.reverse()

    logger.debug(f"Shortest path {start}->{end}: {len(path)} nodes, cost {distances[end]:.4f}")
    return path


def path_cost(graph: Graph, path: List[int], weight: str = 'weighted_length') -> float:
    """
    Sum an edge attribute along a path.

    Raises:
        NodeNotFoundError: If two consecutive path nodes are not joined by an edge
    """
    return sum(
        getattr(graph.get_edge(u, v), weight)
        for u, v in zip(path, path[1:])
    )
