"""
Waypoint generation and graph construction.
"""

from .waypoint_generator import WaypointGenerator, generate_waypoints
from .route_graph_builder import RouteGraphBuilder, build_direct_graph

__all__ = [
    'WaypointGenerator',
    'generate_waypoints',
    'RouteGraphBuilder',
    'build_direct_graph'
]
