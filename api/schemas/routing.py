"""
Pydantic schemas for the safe route API.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RouteRequest(CamelModel):
    """
    Request model for route calculation.

    Coordinates are left untyped at the schema level so that a missing or
    non-numeric one is reported by the planner's own input validation.
    """
    source_lat: Optional[Any] = Field(default=None, description="Source latitude")
    source_lon: Optional[Any] = Field(default=None, description="Source longitude")
    dest_lat: Optional[Any] = Field(default=None, description="Destination latitude")
    dest_lon: Optional[Any] = Field(default=None, description="Destination longitude")
    waypoint_count: int = Field(default=8, ge=0, le=50, description="Intermediate waypoints to generate")
    max_skip: int = Field(default=3, ge=0, le=10, description="Waypoints a shortcut edge may skip")
    penalty_radius_km: float = Field(default=0.4, gt=0.0, le=5.0, description="Incident radius around each sample point")


class Coordinate(CamelModel):
    lat: float
    lon: float


class RouteStats(CamelModel):
    """Statistics about a calculated route."""
    route_length_km: float = Field(..., description="Physical route length in km")
    routing_cost_km: float = Field(..., description="Penalty-weighted cost the route minimized")
    direct_distance_km: float = Field(..., description="Straight-line distance in km")
    estimated_time_minutes: float = Field(..., description="Estimated travel time in minutes")
    incidents_considered: int = Field(..., description="Incidents inside the route area")
    waypoint_count: int = Field(..., description="Points along the returned route")
    penalized_edges: int = Field(0, description="Route segments whose cost was raised by nearby incidents")


class RouteResponse(CamelModel):
    """Response model for route calculation."""
    success: bool = Field(..., description="Whether the safe route was calculated without falling back")
    message: str = Field(..., description="Status message")
    route: List[Coordinate] = Field(default_factory=list, description="Ordered route points")
    statistics: Optional[RouteStats] = Field(default=None, description="Route statistics")
    map_link: str = Field(..., description="Turn-by-turn directions URL")
    route_geojson: Optional[Dict[str, Any]] = Field(default=None, description="Route as GeoJSON FeatureCollection")
    fallback: bool = Field(default=False, description="True if a direct route was returned instead")
    error: Optional[str] = Field(default=None, description="Why the route fell back")


class HealthResponse(CamelModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    incident_data_loaded: bool = Field(..., description="Whether incident data is loaded")
    incident_count: int = Field(..., description="Number of incidents loaded")
    invalid_rows: int = Field(0, description="Rows skipped during the last load")


class ReloadResponse(CamelModel):
    success: bool
    incident_count: int
    message: str


class GeocodeRequest(BaseModel):
    address: str = Field(..., min_length=1, description="Free-form address to look up")


class GeocodeResponse(CamelModel):
    lat: float
    lon: float
    display_name: str


class ErrorResponse(BaseModel):
    """Error response model."""
    success: bool = Field(False, description="Always false for error responses")
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Detailed error message")
    details: Optional[Any] = Field(None, description="Additional error details")
