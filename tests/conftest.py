import numpy as np
import pytest

from safe_route_engine.data.distance_utils import KM_PER_DEGREE
from safe_route_engine.data.models import GeoPoint, Incident

# ~4 km apart in Bengaluru
SOURCE = GeoPoint(12.9716, 77.5946)
DESTINATION = GeoPoint(12.9352, 77.6146)


def north_of(point: GeoPoint, km: float) -> GeoPoint:
    """Point exactly km due north along the meridian."""
    return GeoPoint(point.lat + km / KM_PER_DEGREE, point.lon)


@pytest.fixture
def rng():
    return np.random.default_rng(20240521)


@pytest.fixture
def source():
    return SOURCE


@pytest.fixture
def destination():
    return DESTINATION


@pytest.fixture
def midpoint_incident():
    return Incident(id="mid", lat=(SOURCE.lat + DESTINATION.lat) / 2, lon=(SOURCE.lon + DESTINATION.lon) / 2)
