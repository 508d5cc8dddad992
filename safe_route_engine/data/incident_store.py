"""
Incident storage and spatial indexing for efficient proximity queries.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
from scipy.spatial import cKDTree

from ..errors import DataLoadError
from .distance_utils import chord_for_radius, haversine_distances, unit_vectors
from .incident_loader import parse_incident_rows, read_incident_file
from .models import GeoPoint, Incident, LoadReport

logger = logging.getLogger(__name__)

BoundingBox = Tuple[float, float, float, float]  # (min_lat, max_lat, min_lon, max_lon)


class IncidentStore:
    """
    Read-only incident corpus with a KD-tree spatial index.

    The tree holds unit-sphere vectors, so its nearest neighbours are the
    great-circle nearest at any latitude. Every candidate is re-checked with
    haversine before it is returned. A store is never mutated after
    construction, so it can be shared between request threads without locking.
    """

    def __init__(self, incidents: Sequence[Incident], load_report: Optional[LoadReport] = None):
        """
        Build the store and its spatial index.

        Args:
            incidents: Validated incidents
            load_report: Row counts from the load that produced the incidents
        """
        self._incidents: Tuple[Incident, ...] = tuple(incidents)
        self.load_report = load_report or LoadReport(
            total_rows=len(self._incidents), valid_rows=len(self._incidents)
        )

        # [N, 2] array of (lat, lon)
        self._points = np.array([[i.lat, i.lon] for i in self._incidents], dtype=np.float64).reshape(-1, 2)
        self._points.setflags(write=False)

        self._tree: Optional[cKDTree] = None
        self._build_spatial_index()

    def _build_spatial_index(self) -> None:
        """Build spatial index for fast nearest neighbor queries."""
        if len(self._incidents) == 0:
            logger.info("No incidents provided - incident store is empty")
            return

        self._tree = cKDTree(unit_vectors(self._points[:, 0], self._points[:, 1]))
        logger.debug(f"Spatial index built with {len(self._incidents)} incidents")

    @classmethod
    def empty(cls) -> 'IncidentStore':
        return cls([])

    @classmethod
    def from_incidents(cls, incidents: Iterable[Incident]) -> 'IncidentStore':
        """Index already validated incidents."""
        return cls(list(incidents))

    @classmethod
    def load(cls, rows: Iterable[Mapping[str, Any]]) -> 'IncidentStore':
        """Validate raw rows and index the valid ones."""
        incidents, report = parse_incident_rows(rows)
        return cls(incidents, report)

    @classmethod
    def from_file(cls, data_path: Union[str, Path]) -> 'IncidentStore':
        """
        Load a CSV incident file.

        Raises:
            DataLoadError: If the file is missing or unparseable
        """
        incidents, report = read_incident_file(data_path)
        return cls(incidents, report)

    @property
    def incidents(self) -> Tuple[Incident, ...]:
        return self._incidents

    @property
    def is_empty(self) -> bool:
        return self._tree is None

    def __len__(self) -> int:
        return len(self._incidents)

    def find_within_radius(self, point: Tuple[float, float], radius_km: float,
                           max_candidates: int = 50) -> List[Incident]:
        """
        Get incidents within a great-circle radius of a point.

        Only the max_candidates nearest incidents are inspected, so in very
        dense areas some true matches may be left out; the nearest ones never
        are. Everything that is returned is within the radius (boundary
        inclusive).

        Args:
            point: (lat, lon) of the query point
            radius_km: Search radius in kilometres
            max_candidates: Candidate cap per query

        Returns:
            List of incidents within the radius
        """
        if self._tree is None or radius_km < 0 or max_candidates < 1:
            return []

        lat, lon = float(point[0]), float(point[1])
        # Slack so rounding in the chord never drops a boundary match
        search_chord = chord_for_radius(radius_km) * (1 + 1e-9) + 1e-12

        k = min(max_candidates, len(self._incidents))
        distances, indices = self._tree.query(
            unit_vectors([lat], [lon])[0], k=k, distance_upper_bound=search_chord
        )
        distances = np.atleast_1d(distances)
        indices = np.atleast_1d(indices)

        # Missing neighbours come back as inf distance with index == n
        indices = indices[np.isfinite(distances)]
        if len(indices) == 0:
            return []

        candidates = self._points[indices]
        true_distances = haversine_distances(lat, lon, candidates[:, 0], candidates[:, 1])

        return [self._incidents[idx] for idx, dist in zip(indices, true_distances) if dist <= radius_km]

    def filter_by_bounding_box(self, min_lat: float, max_lat: float,
                               min_lon: float, max_lon: float) -> List[Incident]:
        """
        Get incidents inside a closed latitude/longitude box.

        Args:
            min_lat, max_lat: Latitude bounds
            min_lon, max_lon: Longitude bounds

        Returns:
            Incidents inside the box, in load order
        """
        if len(self._incidents) == 0:
            return []

        mask = (
            (self._points[:, 0] >= min_lat) &
            (self._points[:, 0] <= max_lat) &
            (self._points[:, 1] >= min_lon) &
            (self._points[:, 1] <= max_lon)
        )
        filtered = [self._incidents[idx] for idx in np.flatnonzero(mask)]

        logger.debug(f"Found {len(filtered)} incidents in bounds "
                     f"(original: {len(self._incidents)})")
        return filtered

    def within_bounds(self, bounds: BoundingBox) -> 'IncidentStore':
        """Request-scoped store holding only the incidents inside bounds."""
        return IncidentStore.from_incidents(self.filter_by_bounding_box(*bounds))

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get statistical summary of the incident corpus.

        Returns:
            Dictionary with counts and coordinate bounds
        """
        summary: Dict[str, Any] = {
            'total_incidents': len(self._incidents),
            'total_rows': self.load_report.total_rows,
            'invalid_rows': self.load_report.invalid_rows,
        }
        if len(self._incidents) == 0:
            return summary

        lats = self._points[:, 0]
        lons = self._points[:, 1]
        summary['bounds'] = {
            'lat_min': float(lats.min()),
            'lat_max': float(lats.max()),
            'lon_min': float(lons.min()),
            'lon_max': float(lons.max())
        }
        return summary


def route_bounding_box(source: GeoPoint, destination: GeoPoint,
                       buffer_deg: float) -> BoundingBox:
    """Box around source and destination, padded by buffer_deg on every side."""
    return (
        min(source.lat, destination.lat) - buffer_deg,
        max(source.lat, destination.lat) + buffer_deg,
        min(source.lon, destination.lon) - buffer_deg,
        max(source.lon, destination.lon) + buffer_deg,
    )


class IncidentStoreHandle:
    """
    Process-wide reference to the current IncidentStore.

    Readers call get() once per request and keep that snapshot. A reload
    builds the replacement completely before publishing it with a single
    reference assignment, so readers never see a half-built index.
    """

    def __init__(self, store: Optional[IncidentStore] = None):
        self._store = store if store is not None else IncidentStore.empty()
        # Serializes writers only; readers never take it
        self._write_lock = threading.Lock()

    def get(self) -> IncidentStore:
        return self._store

    def publish(self, store: IncidentStore) -> None:
        with self._write_lock:
            self._store = store
        logger.info(f"Published incident store with {len(store)} incidents")

    def reload(self, data_path: Union[str, Path]) -> bool:
        """
        Rebuild the store from a file and publish it.

        A failed load is logged and leaves the current store in place.

        Returns:
            True if a new store was published
        """
        try:
            store = IncidentStore.from_file(data_path)
        except DataLoadError as e:
            logger.error(f"Incident reload failed, keeping previous store: {e}")
            return False

        self.publish(store)
        return True

    @classmethod
    def from_file(cls, data_path: Union[str, Path]) -> 'IncidentStoreHandle':
        """
        Load the initial store; an unavailable file yields an empty store.
        """
        handle = cls()
        if not handle.reload(data_path):
            logger.warning("Routing will proceed without incident penalties")
        return handle
