"""
Tests for routing configuration.
"""

import dataclasses

import pytest

from safe_route_engine.config import RoutingConfig


@pytest.mark.parametrize("factory", [
    RoutingConfig.create_balanced_config,
    RoutingConfig.create_cautious_config,
    RoutingConfig.create_direct_config,
])
def test_presets_are_valid(factory):
    factory().validate()


def test_cautious_preset_searches_wider_than_direct():
    cautious = RoutingConfig.create_cautious_config()
    direct = RoutingConfig.create_direct_config()

    assert cautious.penalty_radius_km > direct.penalty_radius_km
    assert cautious.waypoint_count > direct.waypoint_count


@pytest.mark.parametrize("field,value", [
    ("waypoint_count", -1),
    ("max_skip", -2),
    ("detour_ratio", 0.5),
    ("penalty_radius_km", 0.0),
    ("max_candidates", 0),
    ("sample_fractions", ()),
    ("sample_fractions", (0.5, 1.5)),
    ("base_penalty", 0.9),
    ("average_speed_kmh", 0.0),
])
def test_validate_rejects_bad_values(field, value):
    config = dataclasses.replace(RoutingConfig(), **{field: value})

    with pytest.raises(ValueError):
        config.validate()


def test_with_overrides_ignores_none():
    config = RoutingConfig().with_overrides(waypoint_count=12, max_skip=None)

    assert config.waypoint_count == 12
    assert config.max_skip == 3


def test_with_overrides_validates():
    with pytest.raises(ValueError):
        RoutingConfig().with_overrides(penalty_radius_km=-1.0)


def test_config_is_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        RoutingConfig().waypoint_count = 3
