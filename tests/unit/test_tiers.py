"""Unit tests for tier math (pure functions, no database)."""

import pytest
from services.rewards_service.services.tiers import (
    calculate_tier,
    get_next_tier,
    get_tier_info,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "points,tier",
    [
        (0, "bronze"),
        (499, "bronze"),
        (500, "silver"),
        (1499, "silver"),
        (1500, "gold"),
        (4999, "gold"),
        (5000, "platinum"),
        (100000, "platinum"),
    ],
)
def test_calculate_tier_boundaries(points, tier):
    assert calculate_tier(points) == tier


@pytest.mark.unit
def test_negative_points_are_bronze():
    assert calculate_tier(-10) == "bronze"


@pytest.mark.unit
def test_tier_info_midway_through_silver():
    info = get_tier_info(1000)

    assert info.current_tier == "silver"
    assert info.tier_color == "#c0c0c0"
    assert info.tier_points == 500
    assert info.next_tier == "gold"
    assert info.points_to_next_tier == 500
    assert info.progress_percentage == 50.0


@pytest.mark.unit
def test_platinum_is_complete():
    info = get_tier_info(7500)

    assert info.current_tier == "platinum"
    assert info.next_tier is None
    assert info.points_to_next_tier == 0
    assert info.progress_percentage == 100.0
    assert get_next_tier(7500) is None
