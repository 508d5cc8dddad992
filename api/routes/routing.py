"""
FastAPI routes for safe routing endpoints.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from safe_route_engine.errors import InvalidInputError

from api.schemas.routing import (
    GeocodeRequest,
    GeocodeResponse,
    HealthResponse,
    ReloadResponse,
    RouteRequest,
    RouteResponse
)
from api.services.geocoding_service import GeocodingError, GeocodingService, get_geocoding_service
from api.services.routing_service import SafeRoutingService, get_routing_service

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api", tags=["routing"])


@router.get("/test", response_model=HealthResponse, summary="Service Check")
def service_check(service: SafeRoutingService = Depends(get_routing_service)):
    """
    Check that the API is up and how many incidents it is routing around.
    """
    return service.get_health_status()


@router.post("/route", response_model=RouteResponse, summary="Calculate Safe Route")
def calculate_route(request: RouteRequest,
                    service: SafeRoutingService = Depends(get_routing_service)):
    """
    Calculate a safety-weighted walking route between two coordinates.

    Once the coordinates are valid a route is always returned; if the safe
    route cannot be built the response carries a direct route, `fallback`
    set to true and an `error` message.

    Example:
        ```json
        {
            "sourceLat": 12.9716,
            "sourceLon": 77.5946,
            "destLat": 12.9352,
            "destLon": 77.6146
        }
        ```
    """
    try:
        return service.calculate_route(request)
    except InvalidInputError as e:
        logger.warning(f"Route request rejected: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.post("/geocode", response_model=GeocodeResponse, summary="Geocode Address")
def geocode_address(request: GeocodeRequest,
                    geocoder: GeocodingService = Depends(get_geocoding_service)):
    """
    Convert an address into coordinates usable by the route endpoint.
    """
    try:
        result = geocoder.geocode(request.address)
    except GeocodingError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Error from geocoding service: {e}"
        )

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Could not find location: {request.address}"
        )
    return result


@router.post("/incidents/reload", response_model=ReloadResponse, summary="Reload Incident Data")
def reload_incidents(service: SafeRoutingService = Depends(get_routing_service)):
    """
    Re-read the incident file. Requests in flight keep the data they started with.
    """
    return service.reload_incidents()
