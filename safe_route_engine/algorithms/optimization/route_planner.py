"""
Main route planner that coordinates waypoint generation, graph construction,
crime penalties and the shortest path solve for a single request.
"""

import logging
import math
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import geojson
import numpy as np

from ...config.routing_config import RoutingConfig
from ...data.distance_utils import degrees_for_radius
from ...data.incident_store import BoundingBox, IncidentStore, IncidentStoreHandle, route_bounding_box
from ...data.models import GeoPoint
from ...errors import InvalidInputError, NodeNotFoundError, NoPathError
from ...mapping.network.route_graph_builder import RouteGraphBuilder, build_direct_graph
from ...mapping.network.waypoint_generator import WaypointGenerator
from ..crime_weighting.proximity_penalty import CrimePenaltyApplier
from ..routing.dijkstra import shortest_path
from ..routing.graph import Graph
from .route_statistics import RouteStatistics, calculate_route_statistics

logger = logging.getLogger(__name__)


def validate_coordinate(value: Any, name: str, limit: float) -> float:
    """
    Parse one request coordinate.

    Args:
        value: Raw value from the request
        name: Field name used in error messages
        limit: Absolute bound (90 for latitude, 180 for longitude)

    Raises:
        InvalidInputError: If value is missing, non-numeric, non-finite or out of range
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidInputError(f"Missing required coordinate: {name}")
    if isinstance(value, bool):
        raise InvalidInputError(f"Coordinate {name} must be numeric, got {value!r}")
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Coordinate {name} must be numeric, got {value!r}") from None
    if not math.isfinite(parsed):
        raise InvalidInputError(f"Coordinate {name} must be finite, got {value!r}")
    if abs(parsed) > limit:
        raise InvalidInputError(f"Coordinate {name} must be within +/-{limit}, got {parsed}")
    return parsed


def build_map_link(points: Sequence[GeoPoint],
                   base_url: str = 'https://www.google.com/maps/dir/') -> str:
    """Turn-by-turn directions URL visiting every point in order."""
    return base_url + ''.join(f"{point.lat},{point.lon}/" for point in points)


@dataclass
class RoutePlan:
    """Result of a route request."""
    route: List[GeoPoint]
    path: List[int]
    statistics: RouteStatistics
    map_link: str
    fallback: bool = False
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'route': [{'lat': point.lat, 'lon': point.lon} for point in self.route],
            'statistics': self.statistics.to_dict(),
            'map_link': self.map_link,
            'fallback': self.fallback,
        }
        if self.error:
            result['error'] = self.error
        return result

    def to_geojson(self) -> geojson.FeatureCollection:
        """
        Route as a GeoJSON FeatureCollection: the line plus start and end points.
        """
        # GeoJSON wants (lon, lat)
        coords = [(point.lon, point.lat) for point in self.route]

        line_feature = geojson.Feature(
            geometry=geojson.LineString(coords),
            properties={
                'route_length_km': self.statistics.route_length_km,
                'routing_cost_km': self.statistics.routing_cost_km,
                'node_count': len(self.path),
                'fallback': self.fallback
            }
        )
        start_feature = geojson.Feature(
            geometry=geojson.Point(coords[0]),
            properties={'type': 'start', 'name': 'Start Point'}
        )
        end_feature = geojson.Feature(
            geometry=geojson.Point(coords[-1]),
            properties={'type': 'end', 'name': 'End Point'}
        )
        return geojson.FeatureCollection([line_feature, start_feature, end_feature])


class SafeRoutePlanner:
    """
    Coordinator for safety-weighted route planning.

    Each call to plan() runs Generate -> Prefilter -> Build -> Penalize ->
    Solve -> Summarize on private per-request state. The only shared object
    is the incident store, read once per request from the handle.
    """

    def __init__(self, incident_store: Union[IncidentStore, IncidentStoreHandle, None] = None,
                 config: Optional[RoutingConfig] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize route planner.

        Args:
            incident_store: Store, or handle to a reloadable store; empty if omitted
            config: Routing configuration parameters
            rng: Random generator for waypoint variation; seeds one child
                 generator per request. Unseeded if omitted.
        """
        if isinstance(incident_store, IncidentStoreHandle):
            self.store_handle = incident_store
        else:
            self.store_handle = IncidentStoreHandle(incident_store)

        self.config = config or RoutingConfig()
        self.config.validate()

        self._rng = rng
        self._rng_lock = threading.Lock()

        logger.info("SafeRoutePlanner initialized successfully")

    def plan(self, source_lat: Any, source_lon: Any, dest_lat: Any, dest_lon: Any,
             waypoint_count: Optional[int] = None, max_skip: Optional[int] = None,
             penalty_radius_km: Optional[float] = None) -> RoutePlan:
        """
        Plan a safety-weighted route.

        Args:
            source_lat, source_lon: Route start in degrees
            dest_lat, dest_lon: Route end in degrees
            waypoint_count: Intermediate waypoints (config default if None)
            max_skip: Secondary edge reach (config default if None)
            penalty_radius_km: Incident radius (config default if None)

        Returns:
            RoutePlan; a direct route with an error message if planning failed

        Raises:
            InvalidInputError: If coordinates or tuning parameters are invalid
        """
        source = GeoPoint(validate_coordinate(source_lat, 'sourceLat', 90.0),
                          validate_coordinate(source_lon, 'sourceLon', 180.0))
        destination = GeoPoint(validate_coordinate(dest_lat, 'destLat', 90.0),
                               validate_coordinate(dest_lon, 'destLon', 180.0))

        try:
            config = self.config.with_overrides(
                waypoint_count=waypoint_count,
                max_skip=max_skip,
                penalty_radius_km=penalty_radius_km
            )
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Invalid routing parameters: {e}") from e

        logger.info(f"Planning safe route from {tuple(source)} to {tuple(destination)}")

        try:
            return self._run_pipeline(source, destination, config)
        except Exception as e:
            logger.error(f"Route planning failed, falling back to direct route: {e}")
            return self._direct_plan(
                source, destination, config,
                error="Error calculating safe route. Falling back to direct route."
            )

    def _run_pipeline(self, source: GeoPoint, destination: GeoPoint,
                      config: RoutingConfig) -> RoutePlan:
        store = self.store_handle.get()

        # Step 1: Generate waypoints
        generator = WaypointGenerator(config.variation_factor, rng=self._request_rng())
        waypoints = generator.generate(source, destination, config.waypoint_count)

        # Step 2: Scope incidents to the route area
        bounds = self._incident_bounds(source, destination, generator, config)
        area_store = store.within_bounds(bounds)
        logger.info(f"Found {len(area_store)} incidents in the route area")

        # Step 3: Build waypoint graph
        graph = RouteGraphBuilder(config.max_skip, config.detour_ratio).build(waypoints)

        # Step 4: Apply crime penalties
        applier = CrimePenaltyApplier(config)
        penalty_report = applier.apply(graph, area_store)

        # Step 5: Solve
        graph, path, error = self._solve(graph, source, destination, applier, area_store)

        # Step 6: Summarize
        statistics = calculate_route_statistics(
            graph, path,
            incidents_considered=len(area_store),
            average_speed_kmh=config.average_speed_kmh
        )
        route = graph.coordinates(path)

        logger.info(f"Route found: {len(path)} nodes, {statistics.route_length_km:.2f} km "
                    f"(direct {statistics.direct_distance_km:.2f} km)")

        return RoutePlan(
            route=route,
            path=path,
            statistics=statistics,
            map_link=build_map_link(route, config.map_link_base),
            fallback=error is not None,
            error=error,
            metadata={
                'bounds': bounds,
                'graph_stats': {'nodes': graph.node_count(), 'edges': graph.edge_count()},
                'penalties': {
                    'inspected': penalty_report.edges_inspected,
                    'penalized': penalty_report.edges_penalized,
                    'skipped': penalty_report.edges_skipped
                }
            }
        )

    def _solve(self, graph: Graph, source: GeoPoint, destination: GeoPoint,
               applier: CrimePenaltyApplier,
               area_store: IncidentStore) -> Tuple[Graph, List[int], Optional[str]]:
        """Shortest path from the first to the last node, or the direct fallback."""
        try:
            path = shortest_path(graph, 0, graph.node_count() - 1)
            return graph, path, None
        except (NoPathError, NodeNotFoundError) as e:
            logger.warning(f"No route through waypoint graph, using direct route: {e}")

        direct = build_direct_graph([source, destination])
        applier.apply(direct, area_store)
        return direct, [0, 1], "No safe route found. Falling back to direct route."

    def _direct_plan(self, source: GeoPoint, destination: GeoPoint,
                     config: RoutingConfig, error: str) -> RoutePlan:
        route = [source, destination]
        graph = build_direct_graph(route)
        statistics = calculate_route_statistics(graph, [0, 1],
                                                average_speed_kmh=config.average_speed_kmh)
        return RoutePlan(
            route=route,
            path=[0, 1],
            statistics=statistics,
            map_link=build_map_link(route, config.map_link_base),
            fallback=True,
            error=error
        )

    def _incident_bounds(self, source: GeoPoint, destination: GeoPoint,
                         generator: WaypointGenerator, config: RoutingConfig) -> BoundingBox:
        """
        Prefilter box around source and destination.

        The configured buffer is widened when waypoints could swing far enough
        sideways that their sample points would reach incidents outside it.
        """
        reach_km = generator.max_deviation_km(source, destination) + config.penalty_radius_km
        max_abs_lat = max(abs(source.lat), abs(destination.lat))
        buffer_deg = max(config.bbox_buffer_deg, degrees_for_radius(max_abs_lat, reach_km))
        return route_bounding_box(source, destination, buffer_deg)

    def _request_rng(self) -> np.random.Generator:
        if self._rng is None:
            return np.random.default_rng()
        # Generators are not thread-safe; draw a child seed under the lock
        with self._rng_lock:
            seed = int(self._rng.integers(0, 2**63 - 1))
        return np.random.default_rng(seed)
