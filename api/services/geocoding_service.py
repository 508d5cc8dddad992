"""
Address lookup backed by OpenStreetMap Nominatim.
"""

import logging
from functools import lru_cache
from typing import Optional

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from api.schemas.routing import GeocodeResponse

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """The geocoding backend failed or is unreachable."""


class GeocodingService:
    """Convert free-form addresses to coordinates."""

    def __init__(self, geocoder=None, user_agent: str = "SafeRouteApp/1.0", timeout: float = 10.0):
        self.geocoder = geocoder or Nominatim(user_agent=user_agent, timeout=timeout)

    def geocode(self, address: str) -> Optional[GeocodeResponse]:
        """
        Look up an address.

        Returns:
            GeocodeResponse, or None if the address is unknown

        Raises:
            GeocodingError: If the backend fails
        """
        try:
            location = self.geocoder.geocode(address)
        except GeopyError as e:
            logger.error(f"Geocoding error for {address!r}: {e}")
            raise GeocodingError(str(e)) from e

        if location is None:
            logger.info(f"Could not geocode address: {address}")
            return None

        return GeocodeResponse(
            lat=float(location.latitude),
            lon=float(location.longitude),
            display_name=location.address
        )


@lru_cache(maxsize=1)
def get_geocoding_service() -> GeocodingService:
    return GeocodingService()
