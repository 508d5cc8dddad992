"""
Data processing and utilities for safe route planning.

This module contains:
- Incident loading, validation and spatial indexing
- Distance calculations
- Shared value types
"""

from .models import GeoPoint, Incident, LoadReport
from .distance_utils import haversine_distance, haversine_distances
from .incident_loader import parse_incident_rows, read_incident_file
from .incident_store import IncidentStore, IncidentStoreHandle, route_bounding_box

__all__ = [
    'GeoPoint',
    'Incident',
    'LoadReport',
    'haversine_distance',
    'haversine_distances',
    'parse_incident_rows',
    'read_incident_file',
    'IncidentStore',
    'IncidentStoreHandle',
    'route_bounding_box'
]
