"""
Proximity-based crime penalties for waypoint graph edges.

Each edge is probed at a few interior points. The closest incident to any
probe decides a multiplier that is applied to the edge's routing cost once;
the physical length is left alone.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from shapely.geometry import LineString

from ...config.routing_config import RoutingConfig
from ...data.distance_utils import haversine_distance
from ...data.incident_store import IncidentStore
from ...errors import PenaltyComputationError
from ..routing.graph import Edge, Graph

logger = logging.getLogger(__name__)


def proximity_penalty(min_distance_km: float, radius_km: float,
                      base_penalty: float = 2.0, penalty_scale: float = 3.0) -> float:
    """
    Penalty multiplier for the nearest incident at min_distance_km.

    Incidents at or beyond the radius give 1.0 (no penalty). Inside it the
    multiplier rises linearly from base_penalty at the edge of the radius to
    base_penalty + penalty_scale at zero distance.
    """
    if min_distance_km >= radius_km:
        return 1.0
    closeness = (radius_km - max(min_distance_km, 0.0)) / radius_km
    return base_penalty + closeness * penalty_scale


@dataclass
class PenaltyReport:
    """Outcome of one penalty pass."""
    edges_inspected: int = 0
    edges_penalized: int = 0
    edges_skipped: int = 0
    max_penalty: float = 1.0


class CrimePenaltyApplier:
    """
    Rewrite edge routing costs according to nearby incidents.
    """

    def __init__(self, config: Optional[RoutingConfig] = None,
                 radius_km: Optional[float] = None):
        """
        Initialize penalty applier.

        Args:
            config: Routing configuration parameters
            radius_km: Incident search radius around each sample point (if None, uses config)
        """
        self.config = config or RoutingConfig()
        self.radius_km = radius_km if radius_km is not None else self.config.penalty_radius_km
        self.sample_fractions: Tuple[float, ...] = tuple(self.config.sample_fractions)

    def apply(self, graph: Graph, incident_store: IncidentStore) -> PenaltyReport:
        """
        Penalize every edge of graph in place.

        A failure on one edge is logged and that edge keeps its current cost;
        the rest of the pass continues.

        Args:
            graph: Freshly built waypoint graph
            incident_store: Incidents to avoid

        Returns:
            PenaltyReport with edge counts
        """
        report = PenaltyReport()

        if incident_store.is_empty:
            logger.info("No incidents in range - skipping crime penalties")
            return report

        for edge in graph.edges():
            report.edges_inspected += 1
            try:
                penalty = self.edge_penalty(graph, edge, incident_store)
            except PenaltyComputationError as e:
                logger.warning(f"Skipping edge {edge.source}-{edge.target}: {e}")
                report.edges_skipped += 1
                continue

            if edge.apply_penalty(penalty):
                report.edges_penalized += 1
                report.max_penalty = max(report.max_penalty, penalty)
                logger.debug(f"Edge {edge.source}-{edge.target} penalized x{penalty:.2f}")

        logger.info(f"Applied penalties to {report.edges_penalized} of "
                    f"{report.edges_inspected} edges based on incident proximity")
        return report

    def edge_penalty(self, graph: Graph, edge: Edge, incident_store: IncidentStore) -> float:
        """
        Worst sample penalty along one edge.

        Raises:
            PenaltyComputationError: If the edge cannot be sampled or queried
        """
        try:
            penalty = 1.0
            for lat, lon in self.sample_points(graph, edge):
                penalty = max(penalty, self.point_penalty(lat, lon, incident_store))
            return penalty
        except Exception as e:
            raise PenaltyComputationError(
                f"penalty failed for edge {edge.source}-{edge.target}: {e}"
            ) from e

    def sample_points(self, graph: Graph, edge: Edge) -> List[Tuple[float, float]]:
        """
        Interior (lat, lon) points along the straight segment of an edge.
        """
        start = graph.get_node(edge.source).point
        end = graph.get_node(edge.target).point

        # Shapely works in (x, y) = (lon, lat)
        segment = LineString([(start.lon, start.lat), (end.lon, end.lat)])

        points = []
        for t in self.sample_fractions:
            sample = segment.interpolate(t, normalized=True)
            points.append((sample.y, sample.x))
        return points

    def point_penalty(self, lat: float, lon: float, incident_store: IncidentStore) -> float:
        """Penalty from the nearest incident within the radius of one point."""
        nearby = incident_store.find_within_radius(
            (lat, lon), self.radius_km, max_candidates=self.config.max_candidates
        )
        if not nearby:
            return 1.0

        min_distance = min(haversine_distance(lat, lon, incident.lat, incident.lon)
                           for incident in nearby)
        return proximity_penalty(min_distance, self.radius_km,
                                 self.config.base_penalty, self.config.penalty_scale)

