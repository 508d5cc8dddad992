"""
Routing algorithms and crime weighting.

This module contains:
- The waypoint graph, indexed heap and Dijkstra solver
- Crime proximity penalties

The request pipeline lives in algorithms.optimization and is imported from
there directly, since it depends on the mapping package.
"""

from .routing import Edge, EdgeKind, Graph, IndexedMinHeap, Node, path_cost, shortest_path
from .crime_weighting import CrimePenaltyApplier, PenaltyReport, proximity_penalty

__all__ = [
    'Edge',
    'EdgeKind',
    'Graph',
    'IndexedMinHeap',
    'Node',
    'path_cost',
    'shortest_path',
    'CrimePenaltyApplier',
    'PenaltyReport',
    'proximity_penalty'
]
