"""
Tests for route statistics.
"""

import pytest

from safe_route_engine.algorithms.optimization import calculate_route_statistics
from safe_route_engine.algorithms.routing import Graph
from safe_route_engine.data.distance_utils import haversine_distance
from safe_route_engine.data.models import GeoPoint

POINTS = [GeoPoint(12.97, 77.59), GeoPoint(12.975, 77.595), GeoPoint(12.97, 77.60)]


def _route_graph():
    graph = Graph()
    for node_id, point in enumerate(POINTS):
        graph.add_node(node_id, point)
    graph.add_edge(0, 1, haversine_distance(*POINTS[0], *POINTS[1]))
    graph.add_edge(1, 2, haversine_distance(*POINTS[1], *POINTS[2]))
    return graph


def test_length_cost_and_time():
    graph = _route_graph()
    graph.get_edge(1, 2).apply_penalty(2.0)
    first = graph.get_edge(0, 1).length
    second = graph.get_edge(1, 2).length

    stats = calculate_route_statistics(graph, [0, 1, 2], incidents_considered=4, average_speed_kmh=30.0)

    assert stats.route_length_km == pytest.approx(first + second)
    assert stats.routing_cost_km == pytest.approx(first + 2 * second)
    assert stats.direct_distance_km == pytest.approx(haversine_distance(*POINTS[0], *POINTS[2]))
    assert stats.estimated_time_minutes == pytest.approx((first + second) / 30.0 * 60)
    assert stats.incidents_considered == 4
    assert stats.waypoint_count == 3
    assert stats.penalized_edges == 1
    assert stats.detour_factor > 1.0


def test_route_is_never_shorter_than_direct():
    stats = calculate_route_statistics(_route_graph(), [0, 1, 2])

    assert stats.route_length_km >= stats.direct_distance_km


def test_broken_path_gives_zero_statistics():
    stats = calculate_route_statistics(_route_graph(), [0, 2])

    assert stats.route_length_km == 0.0
    assert stats.waypoint_count == 0
    assert stats.detour_factor == 1.0


def test_to_dict_keys():
    stats = calculate_route_statistics(_route_graph(), [0, 1, 2])

    assert set(stats.to_dict()) == {
        'route_length_km', 'routing_cost_km', 'direct_distance_km',
        'estimated_time_minutes', 'incidents_considered', 'waypoint_count',
        'penalized_edges'
    }
