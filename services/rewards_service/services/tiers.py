"""Tier thresholds and tier math.

Tiers are a pure function of total points; nothing about them is stored.
"""

from typing import NamedTuple, Optional

from services.rewards_service.schemas.summary import TierInfo


class Tier(NamedTuple):
    name: str
    min_points: int
    color: str


TIERS: tuple[Tier, ...] = (
    Tier("bronze", 0, "#cd7f32"),
    Tier("silver", 500, "#c0c0c0"),
    Tier("gold", 1500, "#ffd700"),
    Tier("platinum", 5000, "#e5e4e2"),
)


def _tier_index(points: int) -> int:
    index = 0
    for i, tier in enumerate(TIERS):
        if points >= tier.min_points:
            index = i
    return index


def calculate_tier(points: int) -> str:
    return TIERS[_tier_index(max(points, 0))].name


def get_next_tier(points: int) -> Optional[Tier]:
    index = _tier_index(max(points, 0))
    return TIERS[index + 1] if index + 1 < len(TIERS) else None


def get_tier_info(points: int) -> TierInfo:
    points = max(int(points), 0)
    current = TIERS[_tier_index(points)]
    next_tier = get_next_tier(points)
    tier_points = points - current.min_points

    if next_tier is None:
        return TierInfo(
            current_tier=current.name,
            tier_color=current.color,
            total_points=points,
            tier_points=tier_points,
            next_tier=None,
            points_to_next_tier=0,
            progress_percentage=100.0,
        )

    span = next_tier.min_points - current.min_points
    progress = min(max(tier_points / span * 100, 0.0), 100.0)
    return TierInfo(
        current_tier=current.name,
        tier_color=current.color,
        total_points=points,
        tier_points=tier_points,
        next_tier=next_tier.name,
        points_to_next_tier=next_tier.min_points - points,
        progress_percentage=round(progress, 2),
    )
