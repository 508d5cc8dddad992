"""
Directed waypoint graph owned by a single route request.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Tuple

import networkx as nx

from ...data.models import GeoPoint
from ...errors import NodeNotFoundError


class EdgeKind(str, Enum):
    """How an edge was created."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    DIRECT = "direct"


@dataclass(frozen=True)
class Node:
    id: int
    point: GeoPoint


@dataclass
class Edge:
    """
    Directed edge between two waypoints.

    length is the physical great-circle distance in km and never changes.
    weighted_length is the routing cost; it starts equal to length and may be
    scaled up once by the crime penalty pass.
    """
    source: int
    target: int
    length: float
    kind: EdgeKind
    weighted_length: float = None
    penalty: float = 1.0

    def __post_init__(self):
        if self.weighted_length is None:
            self.weighted_length = self.length

    @property
    def is_penalized(self) -> bool:
        return self.penalty > 1.0

    def apply_penalty(self, multiplier: float) -> bool:
        """
        Scale the routing cost by multiplier.

        Only the first penalty above 1.0 is applied; later calls and
        multipliers that would lower the cost are ignored.

        Returns:
            True if the routing cost changed
        """
        if self.is_penalized or multiplier <= 1.0:
            return False
        self.penalty = multiplier
        self.weighted_length = self.length * multiplier
        return True


class Graph:
    """
    Mapping of node id to Node plus a mapping of node id to its outgoing edges.
    """

    def __init__(self):
        self.nodes: Dict[int, Node] = {}
        self.adjacency: Dict[int, Dict[int, Edge]] = {}

    def add_node(self, node_id: int, point: GeoPoint) -> Node:
        node = Node(node_id, GeoPoint(float(point[0]), float(point[1])))
        self.nodes[node_id] = node
        self.adjacency.setdefault(node_id, {})
        return node

    def add_edge(self, source: int, target: int, length: float,
                 kind: EdgeKind = EdgeKind.PRIMARY) -> Edge:
        """Add (or replace) the edge source -> target; both nodes must exist."""
        if source not in self.nodes:
            raise NodeNotFoundError(f"Node {source} does not exist")
        if target not in self.nodes:
            raise NodeNotFoundError(f"Node {target} does not exist")
        if length < 0:
            raise ValueError(f"Edge {source}->{target} has negative length {length}")

        edge = Edge(source=source, target=target, length=float(length), kind=EdgeKind(kind))
        self.adjacency[source][target] = edge
        return edge

    def has_node(self, node_id: int) -> bool:
        return node_id in self.nodes

    def has_edge(self, source: int, target: int) -> bool:
        return source in self.adjacency and target in self.adjacency[source]

    def get_node(self, node_id: int) -> Node:
        try:
            return self.nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(f"Node {node_id} does not exist") from None

    def get_edge(self, source: int, target: int) -> Edge:
        if not self.has_edge(source, target):
            raise NodeNotFoundError(f"Edge {source}-{target} does not exist")
        return self.adjacency[source][target]

    def neighbors(self, node_id: int) -> Iterator[Tuple[int, Edge]]:
        return iter(self.adjacency.get(node_id, {}).items())

    def edges(self) -> List[Edge]:
        return [edge for targets in self.adjacency.values() for edge in targets.values()]

    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.adjacency.values())

    def coordinates(self, path: List[int]) -> List[GeoPoint]:
        """Node coordinates along a path."""
        return [self.get_node(node_id).point for node_id in path]

    def to_networkx(self) -> nx.DiGraph:
        """
        Export as a NetworkX DiGraph.

        Nodes carry 'y' (lat) and 'x' (lon); edges carry 'length',
        'weighted_length', 'penalty' and 'kind'.
        """
        graph = nx.DiGraph()
        for node in self.nodes.values():
            graph.add_node(node.id, y=node.point.lat, x=node.point.lon)
        for edge in self.edges():
            graph.add_edge(edge.source, edge.target,
                           length=edge.length,
                           weighted_length=edge.weighted_length,
                           penalty=edge.penalty,
                           kind=edge.kind.value)
        return graph
