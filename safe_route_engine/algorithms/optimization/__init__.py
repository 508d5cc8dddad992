"""
Route planning pipeline and route metrics.
"""

from .route_statistics import RouteStatistics, calculate_route_statistics
from .route_planner import RoutePlan, SafeRoutePlanner, build_map_link, validate_coordinate

__all__ = [
    'RouteStatistics',
    'calculate_route_statistics',
    'RoutePlan',
    'SafeRoutePlanner',
    'build_map_link',
    'validate_coordinate'
]
