"""
Service layer for the safe route API.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

from safe_route_engine import IncidentStoreHandle, RoutingConfig, SafeRoutePlanner
from safe_route_engine.algorithms.optimization import RoutePlan

from api.schemas.routing import (
    Coordinate,
    HealthResponse,
    ReloadResponse,
    RouteRequest,
    RouteResponse,
    RouteStats
)

logger = logging.getLogger(__name__)

DEFAULT_INCIDENT_DATA_PATH = 'incident_data.csv'
API_VERSION = "1.0.0"


class SafeRoutingService:
    """
    Service class that provides safe routing functionality for the API.
    """

    def __init__(self, data_path: Union[str, Path, None] = None,
                 config: Optional[RoutingConfig] = None,
                 store_handle: Optional[IncidentStoreHandle] = None):
        """
        Initialize the routing service.

        Args:
            data_path: Incident CSV file (INCIDENT_DATA_PATH or incident_data.csv if omitted)
            config: Routing configuration parameters
            store_handle: Pre-built store handle; loads data_path if omitted
        """
        self.data_path = Path(data_path or os.environ.get('INCIDENT_DATA_PATH', DEFAULT_INCIDENT_DATA_PATH))

        logger.info("Initializing safe routing service...")
        self.store_handle = store_handle or IncidentStoreHandle.from_file(self.data_path)
        self.planner = SafeRoutePlanner(self.store_handle, config)

    def get_health_status(self) -> HealthResponse:
        """Get the health status of the routing service."""
        store = self.store_handle.get()
        loaded = len(store) > 0
        return HealthResponse(
            status="healthy" if loaded else "degraded",
            version=API_VERSION,
            incident_data_loaded=loaded,
            incident_count=len(store),
            invalid_rows=store.load_report.invalid_rows
        )

    def calculate_route(self, request: RouteRequest) -> RouteResponse:
        """
        Calculate a safe route between two points.

        Raises:
            InvalidInputError: If coordinates are missing or invalid
        """
        plan = self.planner.plan(
            request.source_lat, request.source_lon,
            request.dest_lat, request.dest_lon,
            waypoint_count=request.waypoint_count,
            max_skip=request.max_skip,
            penalty_radius_km=request.penalty_radius_km
        )
        return self._convert_to_response(plan)

    def reload_incidents(self) -> ReloadResponse:
        """Re-read the incident file and publish it if it loads."""
        success = self.store_handle.reload(self.data_path)
        count = len(self.store_handle.get())
        message = (f"Loaded {count} incidents from {self.data_path}" if success
                   else f"Reload failed, still serving {count} incidents")
        return ReloadResponse(success=success, incident_count=count, message=message)

    def _convert_to_response(self, plan: RoutePlan) -> RouteResponse:
        stats = plan.statistics
        return RouteResponse(
            success=not plan.fallback,
            message=("Safe route calculated successfully!" if not plan.fallback
                     else "A direct route has been provided instead."),
            route=[Coordinate(lat=point.lat, lon=point.lon) for point in plan.route],
            statistics=RouteStats(
                route_length_km=round(stats.route_length_km, 3),
                routing_cost_km=round(stats.routing_cost_km, 3),
                direct_distance_km=round(stats.direct_distance_km, 3),
                estimated_time_minutes=round(stats.estimated_time_minutes, 1),
                incidents_considered=stats.incidents_considered,
                waypoint_count=stats.waypoint_count,
                penalized_edges=stats.penalized_edges
            ),
            map_link=plan.map_link,
            route_geojson=plan.to_geojson(),
            fallback=plan.fallback,
            error=plan.error
        )


@lru_cache(maxsize=1)
def get_routing_service() -> SafeRoutingService:
    """Process-wide service instance, created on first use."""
    return SafeRoutingService()
