"""
Tests for incident loading, the spatial index and store publishing.
"""

import threading

import numpy as np
import pytest

from safe_route_engine.data import (
    GeoPoint,
    Incident,
    IncidentStore,
    IncidentStoreHandle,
    parse_incident_rows,
    read_incident_file,
    route_bounding_box
)
from safe_route_engine.data.distance_utils import haversine_distance, haversine_distances
from safe_route_engine.errors import DataLoadError

from conftest import SOURCE, north_of


def _brute_force_ids(incidents, point, radius_km):
    lats = np.array([i.lat for i in incidents])
    lons = np.array([i.lon for i in incidents])
    distances = haversine_distances(point.lat, point.lon, lats, lons)
    return {incident.id for incident, d in zip(incidents, distances) if d <= radius_km}


def test_find_within_radius_returns_only_close_incidents():
    """Incidents due north at known distances are split by the radius."""
    incidents = [
        Incident(id=km, lat=north_of(SOURCE, km).lat, lon=SOURCE.lon)
        for km in (0.1, 0.3, 0.5, 1.0)
    ]
    store = IncidentStore.from_incidents(incidents)

    found = store.find_within_radius(SOURCE, 0.4)

    assert {incident.id for incident in found} == {0.1, 0.3}


def test_find_within_radius_boundary_is_inclusive():
    incident = Incident(id="edge", lat=SOURCE.lat + 0.003, lon=SOURCE.lon + 0.002)
    store = IncidentStore.from_incidents([incident])
    radius = float(haversine_distances(SOURCE.lat, SOURCE.lon,
                                       np.array([incident.lat]), np.array([incident.lon]))[0])

    assert store.find_within_radius(SOURCE, radius) == [incident]
    assert store.find_within_radius(SOURCE, radius * 0.999) == []


@pytest.mark.parametrize("center", [GeoPoint(12.97, 77.59), GeoPoint(59.9, 10.75), GeoPoint(-33.9, 151.2)])
def test_find_within_radius_matches_brute_force(center):
    """With an uncapped candidate count the KD-tree answer is exact."""
    rng = np.random.default_rng(11)
    lats = center.lat + rng.uniform(-0.02, 0.02, size=300)
    lons = center.lon + rng.uniform(-0.02, 0.02, size=300)
    incidents = [Incident(id=i, lat=float(a), lon=float(b)) for i, (a, b) in enumerate(zip(lats, lons))]
    store = IncidentStore.from_incidents(incidents)

    for radius in (0.2, 0.8, 1.5):
        found = store.find_within_radius(center, radius, max_candidates=len(incidents))
        assert {incident.id for incident in found} == _brute_force_ids(incidents, center, radius)


def test_find_within_radius_respects_candidate_cap():
    incidents = [Incident(id=i, lat=SOURCE.lat + i * 1e-5, lon=SOURCE.lon) for i in range(20)]
    store = IncidentStore.from_incidents(incidents)

    found = store.find_within_radius(SOURCE, 1.0, max_candidates=5)

    assert len(found) == 5
    assert all(haversine_distance(SOURCE.lat, SOURCE.lon, i.lat, i.lon) <= 1.0 for i in found)


def test_candidate_cap_keeps_nearest_incident_at_high_latitude():
    """At 60N a degree of longitude is half as long as a degree of latitude."""
    center = GeoPoint(60.0, 10.0)
    crowd = [Incident(id=i, lat=north_of(center, 0.222).lat, lon=center.lon) for i in range(50)]
    # 0.167 km due east, smaller in km but larger in degrees than the crowd
    east = Incident(id="east", lat=center.lat, lon=center.lon + 0.003)
    store = IncidentStore.from_incidents(crowd + [east])

    found = store.find_within_radius(center, 0.4, max_candidates=50)

    assert "east" in {incident.id for incident in found}
    assert len(found) == 50


def test_empty_store():
    store = IncidentStore.empty()

    assert store.is_empty
    assert len(store) == 0
    assert store.find_within_radius(SOURCE, 5.0) == []
    assert store.filter_by_bounding_box(-90, 90, -180, 180) == []
    assert store.get_statistics()['total_incidents'] == 0


def test_filter_by_bounding_box_is_closed():
    incidents = [
        Incident(id="inside", lat=12.95, lon=77.60),
        Incident(id="corner", lat=13.0, lon=77.7),
        Incident(id="outside", lat=13.5, lon=77.6),
    ]
    store = IncidentStore.from_incidents(incidents)

    found = store.filter_by_bounding_box(12.9, 13.0, 77.5, 77.7)

    assert [incident.id for incident in found] == ["inside", "corner"]
    assert len(store.within_bounds((12.9, 13.0, 77.5, 77.7))) == 2


def test_route_bounding_box_pads_both_points():
    bounds = route_bounding_box(GeoPoint(12.97, 77.59), GeoPoint(12.93, 77.61), 0.1)

    assert bounds == pytest.approx((12.83, 13.07, 77.49, 77.71))


def test_parse_incident_rows_accepts_column_variants():
    rows = [
        {'id': '7', 'lat': '12.9', 'long': '77.6'},
        {'latitude': 12.8, 'longitude': 77.5},
        {'Latitude': '12.7', 'Longitude': '77.4'},
        {'lat': 12.6, 'lon': 77.3},
    ]

    incidents, report = parse_incident_rows(rows)

    assert [(i.lat, i.lon) for i in incidents] == [(12.9, 77.6), (12.8, 77.5), (12.7, 77.4), (12.6, 77.3)]
    assert incidents[0].id == '7'
    assert incidents[1].id == 1
    assert report.valid_rows == 4
    assert report.invalid_rows == 0


def test_parse_incident_rows_counts_invalid_rows():
    rows = [
        {'lat': 'abc', 'long': '77.6'},
        {'lat': '', 'long': '77.6'},
        {'lat': '12.9'},
        {'lat': 'nan', 'long': '77.6'},
        {'lat': '95.0', 'long': '77.6'},
        {'lat': '0', 'long': '0'},
        {'lat': ' 12.9 ', 'long': '77.6'},
    ]

    incidents, report = parse_incident_rows(rows)

    assert report.total_rows == 7
    assert report.invalid_rows == 5
    assert report.valid_rows == 2
    # Zero is a real coordinate
    assert (incidents[0].lat, incidents[0].lon) == (0.0, 0.0)
    assert incidents[1].lat == 12.9


def test_read_incident_file(tmp_path):
    data_file = tmp_path / "incidents.csv"
    data_file.write_text("id,lat,long,type\n1,12.97,77.59,theft\n2,bad,77.60,assault\n3,12.95,77.61,\n")

    store = IncidentStore.from_file(data_file)

    assert len(store) == 2
    assert store.load_report.invalid_rows == 1
    assert [incident.id for incident in store.incidents] == ['1', '3']


def test_read_incident_file_missing(tmp_path):
    with pytest.raises(DataLoadError):
        read_incident_file(tmp_path / "nope.csv")


def test_handle_reload_keeps_previous_store_on_failure(tmp_path):
    first = IncidentStore.from_incidents([Incident(id=1, lat=12.9, lon=77.6)])
    handle = IncidentStoreHandle(first)

    assert handle.reload(tmp_path / "missing.csv") is False
    assert handle.get() is first


def test_handle_reload_publishes_new_store(tmp_path):
    data_file = tmp_path / "incidents.csv"
    data_file.write_text("latitude,longitude\n12.9,77.6\n12.8,77.5\n")
    handle = IncidentStoreHandle()
    snapshot = handle.get()

    assert handle.reload(data_file) is True

    assert len(handle.get()) == 2
    # A reader's snapshot is never modified by a reload
    assert snapshot.is_empty


def test_handle_from_missing_file_is_empty(tmp_path):
    handle = IncidentStoreHandle.from_file(tmp_path / "missing.csv")

    assert handle.get().is_empty


def test_concurrent_readers_see_whole_stores():
    small = IncidentStore.from_incidents([Incident(id=0, lat=SOURCE.lat, lon=SOURCE.lon)])
    large = IncidentStore.from_incidents(
        [Incident(id=i, lat=SOURCE.lat + i * 1e-4, lon=SOURCE.lon) for i in range(100)]
    )
    handle = IncidentStoreHandle(small)
    errors = []
    stop = threading.Event()

    def reader():
        while not stop.is_set():
            store = handle.get()
            found = store.find_within_radius(SOURCE, 2.0, max_candidates=1000)
            if len(found) not in (1, 100):
                errors.append(len(found))

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for _ in range(50):
        handle.publish(large)
        handle.publish(small)
    stop.set()
    for thread in threads:
        thread.join()

    assert errors == []
