"""
Builds the directed waypoint graph the solver runs on.
"""

import logging
from typing import Sequence

from ...algorithms.routing.graph import EdgeKind, Graph
from ...data.distance_utils import haversine_distance
from ...data.models import GeoPoint

logger = logging.getLogger(__name__)


class RouteGraphBuilder:
    """
    Turn an ordered waypoint sequence into a Graph.

    Node i is waypoint i. Primary edges chain the waypoints in order, so the
    last node is always reachable from the first. Secondary edges let the
    route skip up to max_skip waypoints, as long as the shortcut is shorter
    than detour_ratio times the primary edge leaving the same node.
    """

    def __init__(self, max_skip: int = 3, detour_ratio: float = 2.5):
        self.max_skip = max_skip
        self.detour_ratio = detour_ratio

    def build(self, waypoints: Sequence[GeoPoint]) -> Graph:
        """
        Build the waypoint graph; never raises.

        Args:
            waypoints: Ordered (lat, lon) points, source first and destination last

        Returns:
            Waypoint graph, or the direct two-node graph if the waypoints are unusable
        """
        try:
            graph = self._build_waypoint_graph(waypoints)
            logger.info(f"Built waypoint graph: {graph.node_count()} nodes, {graph.edge_count()} edges")
            return graph
        except Exception as e:
            logger.error(f"Error creating waypoint graph, using direct route: {e}")
            return build_direct_graph(waypoints)

    def _build_waypoint_graph(self, waypoints: Sequence[GeoPoint]) -> Graph:
        if len(waypoints) < 2:
            raise ValueError(f"Need at least 2 waypoints, got {len(waypoints)}")

        points = [GeoPoint(float(p[0]), float(p[1])) for p in waypoints]
        count = len(points)

        graph = Graph()
        for node_id, point in enumerate(points):
            graph.add_node(node_id, point)

        primary_lengths = []
        for i in range(count - 1):
            length = haversine_distance(points[i].lat, points[i].lon,
                                        points[i + 1].lat, points[i + 1].lon)
            graph.add_edge(i, i + 1, length, EdgeKind.PRIMARY)
            primary_lengths.append(length)

        for i in range(count - 1):
            last = min(i + self.max_skip + 1, count - 1)
            for j in range(i + 2, last + 1):
                length = haversine_distance(points[i].lat, points[i].lon,
                                            points[j].lat, points[j].lon)
                if length < self.detour_ratio * primary_lengths[i]:
                    graph.add_edge(i, j, length, EdgeKind.SECONDARY)

        return graph


def build_direct_graph(waypoints: Sequence[GeoPoint]) -> Graph:
    """
    Two-node graph with a single direct edge from the first to the last point.

    Returns an empty graph if even that cannot be built.
    """
    graph = Graph()
    try:
        first = GeoPoint(float(waypoints[0][0]), float(waypoints[0][1]))
        last = GeoPoint(float(waypoints[-1][0]), float(waypoints[-1][1]))
        graph.add_node(0, first)
        graph.add_node(1, last)
        graph.add_edge(0, 1, haversine_distance(first.lat, first.lon, last.lat, last.lon),
                       EdgeKind.DIRECT)
    except Exception as e:
        logger.error(f"Could not build direct fallback graph: {e}")
        return Graph()
    return graph
