"""
Distance calculation utilities optimized for performance.
"""

import math

import numpy as np

# Mean Earth radius in kilometres
EARTH_RADIUS_KM = 6371.0

# Great-circle length of one degree of arc on the sphere above
KM_PER_DEGREE = EARTH_RADIUS_KM * math.pi / 180.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points on Earth.

    Args:
        lat1, lon1: First point coordinates
        lat2, lon2: Second point coordinates

    Returns:
        Distance in kilometres
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (math.sin(delta_lat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2)
    # Rounding can push a a hair past 1 for antipodal points
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def haversine_distances(lat: float, lon: float,
                        lats: np.ndarray, lons: np.ndarray) -> np.ndarray:
    """
    Vectorized great circle distance from one point to many.

    Args:
        lat, lon: Reference point
        lats, lons: Arrays of target coordinates

    Returns:
        Array of distances in kilometres
    """
    lat_rad = np.radians(lat)
    lats_rad = np.radians(lats)
    delta_lat = lats_rad - lat_rad
    delta_lon = np.radians(lons - lon)

    a = (np.sin(delta_lat / 2) ** 2 +
         np.cos(lat_rad) * np.cos(lats_rad) * np.sin(delta_lon / 2) ** 2)
    a = np.clip(a, 0.0, 1.0)
    return EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def unit_vectors(lats: np.ndarray, lons: np.ndarray) -> np.ndarray:
    """
    Points on the unit sphere, shape [N, 3].

    Euclidean (chord) distance between these grows monotonically with
    great-circle distance, so nearest-neighbour order is the same at every
    latitude.
    """
    lats_rad = np.radians(np.asarray(lats, dtype=np.float64))
    lons_rad = np.radians(np.asarray(lons, dtype=np.float64))
    cos_lat = np.cos(lats_rad)
    return np.column_stack((cos_lat * np.cos(lons_rad),
                            cos_lat * np.sin(lons_rad),
                            np.sin(lats_rad)))


def chord_for_radius(radius_km: float) -> float:
    """Unit-sphere chord length spanning a great-circle radius."""
    angle = min(radius_km / EARTH_RADIUS_KM, math.pi)
    return 2 * math.sin(angle / 2)


def degrees_for_radius(lat: float, radius_km: float) -> float:
    """
    Conservative planar search radius in degrees for a great-circle radius.

    Any point whose great-circle distance from (lat, ...) is within radius_km
    lies within the returned Euclidean radius in (lat, lon) degree space.
    The longitude stretch is evaluated at the poleward edge of the circle.
    """
    lat_span = radius_km / KM_PER_DEGREE
    poleward = min(90.0, abs(lat) + lat_span)
    cos_lat = max(math.cos(math.radians(poleward)), 1e-6)
    # 1% slack covers the difference between the sphere and the flat approximation
    return 1.01 * lat_span / cos_lat
