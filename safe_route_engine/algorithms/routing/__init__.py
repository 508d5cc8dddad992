"""
Core routing algorithms.
"""

from .graph import Edge, EdgeKind, Graph, Node
from .indexed_heap import IndexedMinHeap
from .dijkstra import path_cost, shortest_path

__all__ = [
    'Edge',
    'EdgeKind',
    'Graph',
    'Node',
    'IndexedMinHeap',
    'path_cost',
    'shortest_path'
]
