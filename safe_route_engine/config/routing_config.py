"""
Configuration management for safety-weighted route planning parameters.
"""

from dataclasses import dataclass, field, replace
from typing import Tuple


@dataclass(frozen=True)
class RoutingConfig:
    """Tuning parameters for the waypoint routing pipeline."""

    # Waypoint Generation
    waypoint_count: int = 8  # intermediate points between source and destination
    variation_factor: float = 0.03  # lateral deviation as a fraction of direct distance

    # Graph Construction
    max_skip: int = 3  # how many waypoints a secondary edge may jump over
    detour_ratio: float = 2.5  # secondary edge must be shorter than this x primary edge

    # Crime Penalties
    penalty_radius_km: float = 0.4  # 400m around each sample point
    max_candidates: int = 50  # nearest incidents inspected per sample point
    sample_fractions: Tuple[float, ...] = field(default=(0.25, 0.5, 0.75))
    base_penalty: float = 2.0  # multiplier for an incident right at the radius
    penalty_scale: float = 3.0  # extra multiplier as the incident approaches zero distance

    # Incident Prefilter
    bbox_buffer_deg: float = 0.1  # roughly 10km around source/destination

    # Statistics and Output
    average_speed_kmh: float = 30.0  # rough urban average
    map_link_base: str = 'https://www.google.com/maps/dir/'

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.waypoint_count < 0:
            raise ValueError("waypoint_count must be >= 0")
        if self.variation_factor < 0:
            raise ValueError("variation_factor must be >= 0")
        if self.max_skip < 0:
            raise ValueError("max_skip must be >= 0")
        if self.detour_ratio < 1.0:
            raise ValueError("detour_ratio must be >= 1.0")
        if self.penalty_radius_km <= 0:
            raise ValueError("penalty_radius_km must be positive")
        if self.max_candidates < 1:
            raise ValueError("max_candidates must be >= 1")
        if not self.sample_fractions:
            raise ValueError("sample_fractions must not be empty")
        if any(not 0.0 <= t <= 1.0 for t in self.sample_fractions):
            raise ValueError("sample_fractions must lie within [0, 1]")
        if self.base_penalty < 1.0:
            raise ValueError("base_penalty must be >= 1.0")
        if self.penalty_scale < 0:
            raise ValueError("penalty_scale must be >= 0")
        if self.bbox_buffer_deg < 0:
            raise ValueError("bbox_buffer_deg must be >= 0")
        if self.average_speed_kmh <= 0:
            raise ValueError("average_speed_kmh must be positive")

    def with_overrides(self, **overrides) -> 'RoutingConfig':
        """Return a validated copy with the given fields replaced (None values are ignored)."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        config = replace(self, **changes)
        config.validate()
        return config

    @classmethod
    def create_balanced_config(cls) -> 'RoutingConfig':
        """Create balanced configuration (default)."""
        return cls()

    @classmethod
    def create_cautious_config(cls) -> 'RoutingConfig':
        """
        Create configuration that prioritizes safety over distance.

        More waypoints and wider swings give the solver more alternatives,
        and a larger radius with steeper penalties pushes it further from incidents.
        """
        return cls(
            waypoint_count=12,
            variation_factor=0.06,
            max_skip=4,
            detour_ratio=3.0,
            penalty_radius_km=0.6,
            penalty_scale=5.0
        )

    @classmethod
    def create_direct_config(cls) -> 'RoutingConfig':
        """Create configuration that stays close to the straight line."""
        return cls(
            waypoint_count=4,
            variation_factor=0.01,
            max_skip=2,
            penalty_radius_km=0.2
        )
