"""
Mapping functionality for safe route planning.

This module contains:
- Synthetic waypoint generation
- Waypoint graph construction
"""

from .network import RouteGraphBuilder, WaypointGenerator, build_direct_graph, generate_waypoints

__all__ = [
    'RouteGraphBuilder',
    'WaypointGenerator',
    'build_direct_graph',
    'generate_waypoints'
]
