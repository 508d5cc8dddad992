"""
Synthetic waypoint generation between a source and a destination.

There is no street network, so alternative geometries are created by
pushing evenly spaced interpolation points sideways by a random amount.
The push is largest halfway along the route and vanishes at both ends.
"""

import logging
import math
from typing import List, Optional

import numpy as np

from ...data.distance_utils import haversine_distance
from ...data.models import GeoPoint

logger = logging.getLogger(__name__)

# Approximate km per degree used for the lateral offset conversion
KM_PER_DEGREE_APPROX = 111.32


def generate_waypoints(source: GeoPoint, destination: GeoPoint, count: int = 8,
                       variation_factor: float = 0.03,
                       rng: Optional[np.random.Generator] = None) -> List[GeoPoint]:
    """
    Generate waypoints along a route with randomized lateral variation.

    Args:
        source: (lat, lon) of route start
        destination: (lat, lon) of route end
        count: Number of intermediate waypoints
        variation_factor: Peak lateral deviation as a fraction of the direct distance
        rng: Random generator; a fresh unseeded one is used if omitted

    Returns:
        count + 2 points, starting at source and ending at destination.
        Degenerate input yields just [source, destination].
    """
    source = GeoPoint(*source)
    destination = GeoPoint(*destination)
    fallback = [source, destination]

    if not all(math.isfinite(v) for v in (*source, *destination, variation_factor)):
        logger.error(f"Invalid coordinates for waypoint generation: {source} -> {destination}")
        return fallback
    if count < 0:
        logger.error(f"Invalid waypoint count {count}")
        return fallback

    if rng is None:
        rng = np.random.default_rng()

    direct_distance = haversine_distance(source.lat, source.lon, destination.lat, destination.lon)

    lat_diff = destination.lat - source.lat
    lon_diff = destination.lon - source.lon

    # Unit vector perpendicular to the direct path
    perp_lat, perp_lon = -lon_diff, lat_diff
    norm = math.hypot(perp_lat, perp_lon)
    if norm > 0:
        perp_lat /= norm
        perp_lon /= norm

    waypoints = [source]
    try:
        for i in range(1, count + 1):
            t = i / (count + 1)

            base_lat = source.lat + lat_diff * t
            base_lon = source.lon + lon_diff * t

            # Parabolic envelope, max at t=0.5
            deviation = variation_factor * 4 * t * (1 - t) * direct_distance
            offset_km = float(rng.uniform(-deviation, deviation)) if deviation > 0 else 0.0

            waypoint_lat = base_lat + perp_lat * offset_km / KM_PER_DEGREE_APPROX
            waypoint_lon = base_lon + perp_lon * offset_km / (
                KM_PER_DEGREE_APPROX * math.cos(math.radians(base_lat))
            )

            if not (math.isfinite(waypoint_lat) and math.isfinite(waypoint_lon)):
                logger.error(f"Waypoint {i} is not finite, falling back to direct route")
                return fallback

            waypoints.append(GeoPoint(waypoint_lat, waypoint_lon))
    except ArithmeticError as e:
        logger.error(f"Error generating waypoints: {e}")
        return fallback

    waypoints.append(destination)

    logger.debug(f"Generated {count} waypoints over {direct_distance:.2f} km")
    return waypoints


class WaypointGenerator:
    """Waypoint generation bound to a fixed variation factor and random source."""

    def __init__(self, variation_factor: float = 0.03,
                 rng: Optional[np.random.Generator] = None):
        self.variation_factor = variation_factor
        self.rng = rng if rng is not None else np.random.default_rng()

    def generate(self, source: GeoPoint, destination: GeoPoint, count: int = 8) -> List[GeoPoint]:
        return generate_waypoints(source, destination, count,
                                  variation_factor=self.variation_factor, rng=self.rng)

    def max_deviation_km(self, source: GeoPoint, destination: GeoPoint) -> float:
        """Largest lateral offset any generated waypoint can have."""
        return self.variation_factor * haversine_distance(
            source.lat, source.lon, destination.lat, destination.lon
        )
