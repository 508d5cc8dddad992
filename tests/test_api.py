"""
Tests for the HTTP API.
"""

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from geopy.exc import GeocoderServiceError

from api.main import app
from api.services.geocoding_service import GeocodingService, get_geocoding_service
from api.services.routing_service import SafeRoutingService, get_routing_service
from safe_route_engine import IncidentStore, IncidentStoreHandle

from conftest import DESTINATION, SOURCE

ROUTE_BODY = {
    "sourceLat": SOURCE.lat,
    "sourceLon": SOURCE.lon,
    "destLat": DESTINATION.lat,
    "destLon": DESTINATION.lon,
}


class FakeGeocoder:
    """Stands in for Nominatim."""

    def __init__(self, known=None, fail=False):
        self.known = known or {}
        self.fail = fail

    def geocode(self, address):
        if self.fail:
            raise GeocoderServiceError("service down")
        return self.known.get(address)


@pytest.fixture
def routing_service(tmp_path, midpoint_incident):
    data_file = tmp_path / "incidents.csv"
    data_file.write_text(f"id,lat,long\n1,{midpoint_incident.lat},{midpoint_incident.lon}\n2,oops,77.6\n")
    handle = IncidentStoreHandle(IncidentStore.from_incidents([midpoint_incident]))
    service = SafeRoutingService(data_path=data_file, store_handle=handle)
    return service


@pytest.fixture
def client(routing_service):
    geocoder = GeocodingService(geocoder=FakeGeocoder(known={
        "MG Road, Bengaluru": SimpleNamespace(latitude=12.9756, longitude=77.6050,
                                              address="MG Road, Bengaluru, Karnataka, India")
    }))
    app.dependency_overrides[get_routing_service] = lambda: routing_service
    app.dependency_overrides[get_geocoding_service] = lambda: geocoder
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "operational"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["incident_count"] == 1


def test_service_check(client):
    response = client.get("/api/test")

    body = response.json()
    assert response.status_code == 200
    assert body["status"] == "healthy"
    assert body["incidentDataLoaded"] is True
    assert body["incidentCount"] == 1


def test_route(client):
    response = client.post("/api/route", json=ROUTE_BODY)

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["fallback"] is False
    assert body["error"] is None
    # Shortcut edges can skip waypoints
    assert 2 <= len(body["route"]) <= 10
    assert body["route"][0] == {"lat": SOURCE.lat, "lon": SOURCE.lon}
    assert body["route"][-1] == {"lat": DESTINATION.lat, "lon": DESTINATION.lon}
    assert body["mapLink"].startswith("https://www.google.com/maps/dir/")
    stats = body["statistics"]
    assert stats["routeLengthKm"] >= stats["directDistanceKm"]
    assert stats["incidentsConsidered"] == 1
    assert body["routeGeojson"]["type"] == "FeatureCollection"


def test_route_with_overrides(client):
    response = client.post("/api/route", json={**ROUTE_BODY, "waypointCount": 3, "maxSkip": 0})

    assert response.status_code == 200
    assert len(response.json()["route"]) == 5


def test_route_missing_coordinate_is_bad_request(client):
    body = dict(ROUTE_BODY)
    del body["destLon"]

    response = client.post("/api/route", json=body)

    assert response.status_code == 400
    assert "destLon" in response.json()["detail"]


def test_route_out_of_range_is_bad_request(client):
    response = client.post("/api/route", json={**ROUTE_BODY, "sourceLat": 123.0})

    assert response.status_code == 400


@pytest.mark.parametrize("value", ["abc", [12.9], {"lat": 12.9}, True])
def test_route_non_numeric_coordinate_is_bad_request(client, value):
    response = client.post("/api/route", json={**ROUTE_BODY, "sourceLat": value})

    assert response.status_code == 400
    assert "sourceLat" in response.json()["detail"]


def test_route_numeric_string_coordinate_is_accepted(client):
    response = client.post("/api/route", json={**ROUTE_BODY, "sourceLat": str(SOURCE.lat)})

    assert response.status_code == 200
    assert response.json()["route"][0]["lat"] == SOURCE.lat


def test_route_bad_tuning_field_fails_validation(client):
    response = client.post("/api/route", json={**ROUTE_BODY, "waypointCount": 500})

    assert response.status_code == 422
    assert response.json()["error"] == "validation_error"


def test_geocode_found(client):
    response = client.post("/api/geocode", json={"address": "MG Road, Bengaluru"})

    assert response.status_code == 200
    assert response.json() == {
        "lat": 12.9756,
        "lon": 77.6050,
        "displayName": "MG Road, Bengaluru, Karnataka, India"
    }


def test_geocode_not_found(client):
    response = client.post("/api/geocode", json={"address": "Nowhere Lane"})

    assert response.status_code == 404


def test_geocode_backend_failure(client):
    app.dependency_overrides[get_geocoding_service] = lambda: GeocodingService(geocoder=FakeGeocoder(fail=True))

    response = client.post("/api/geocode", json={"address": "MG Road"})

    assert response.status_code == 502


def test_reload_incidents(client):
    response = client.post("/api/incidents/reload")

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["incidentCount"] == 1

    health = client.get("/api/test").json()
    assert health["invalidRows"] == 1


def test_reload_missing_file_keeps_data(client, routing_service, tmp_path):
    routing_service.data_path = tmp_path / "gone.csv"

    response = client.post("/api/incidents/reload")

    body = response.json()
    assert body["success"] is False
    assert body["incidentCount"] == 1
