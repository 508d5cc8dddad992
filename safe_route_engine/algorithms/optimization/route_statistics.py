"""
Human-facing metrics for a resolved route.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List

from ...data.distance_utils import haversine_distance
from ..routing.dijkstra import path_cost
from ..routing.graph import Graph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteStatistics:
    """Summary of a route; all distances in km."""
    route_length_km: float = 0.0
    routing_cost_km: float = 0.0
    direct_distance_km: float = 0.0
    estimated_time_minutes: float = 0.0
    incidents_considered: int = 0
    waypoint_count: int = 0
    penalized_edges: int = 0

    @property
    def detour_factor(self) -> float:
        if self.direct_distance_km <= 0:
            return 1.0
        return self.route_length_km / self.direct_distance_km

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def calculate_route_statistics(graph: Graph, path: List[int],
                               incidents_considered: int = 0,
                               average_speed_kmh: float = 30.0) -> RouteStatistics:
    """
    Generate route statistics to help users understand the safe route.

    route_length_km is the physical distance walked; routing_cost_km is the
    penalty-scaled cost the solver minimized. Never raises: any failure
    yields all-zero statistics.

    Args:
        graph: Graph the path was solved on
        path: Node IDs from start to end
        incidents_considered: Number of incidents in the route area
        average_speed_kmh: Speed used for the time estimate

    Returns:
        RouteStatistics for the path
    """
    try:
        first = graph.get_node(path[0]).point
        last = graph.get_node(path[-1]).point

        route_length = path_cost(graph, path, 'length')
        routing_cost = path_cost(graph, path, 'weighted_length')
        penalized = sum(1 for u, v in zip(path, path[1:]) if graph.get_edge(u, v).is_penalized)

        return RouteStatistics(
            route_length_km=route_length,
            routing_cost_km=routing_cost,
            direct_distance_km=haversine_distance(first.lat, first.lon, last.lat, last.lon),
            estimated_time_minutes=route_length / average_speed_kmh * 60,
            incidents_considered=incidents_considered,
            waypoint_count=len(path),
            penalized_edges=penalized
        )
    except Exception as e:
        logger.error(f"Error generating route statistics: {e}")
        return RouteStatistics()
