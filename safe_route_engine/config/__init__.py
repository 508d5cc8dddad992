"""
Configuration management for safe route planning.
"""

from .routing_config import RoutingConfig

__all__ = [
    'RoutingConfig'
]
