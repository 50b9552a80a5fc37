"""
studypass.engine.progress — Levels & Progress for UI Display
==============================================================

Levels are flat 1000-point steps::

    level = floor(points / 1000) + 1

Progress combines the level step with the tier lookup so the front-end
can draw both bars from one call.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from studypass.constants import POINTS_PER_LEVEL
from studypass.engine.tiers import (
    DEFAULT_TIERS,
    Tier,
    clamp_points,
    get_pass_points_for_next_tier,
    tier_progress_percent,
)


def calculate_level(pass_points: object) -> int:
    """Level for a balance.  Negative or malformed balances are level 1."""
    return clamp_points(pass_points) // POINTS_PER_LEVEL + 1


def points_for_next_level(pass_points: object) -> int:
    """Total balance at which the next level starts."""
    return calculate_level(pass_points) * POINTS_PER_LEVEL


@dataclass(frozen=True, slots=True)
class PassPointsProgress:
    current_level: int
    current_pass_points: int
    progress_in_level: int
    points_needed_for_level: int
    points_needed: int
    progress_percentage: float
    tier: Tier
    next_tier: Tier | None
    points_to_next_tier: int
    tier_progress_percentage: float | None

    def to_dict(self) -> dict:
        return {
            "current_level": self.current_level,
            "current_pass_points": self.current_pass_points,
            "progress_in_level": self.progress_in_level,
            "points_needed_for_level": self.points_needed_for_level,
            "points_needed": self.points_needed,
            "progress_percentage": self.progress_percentage,
            "tier": self.tier.name,
            "next_tier": self.next_tier.name if self.next_tier else None,
            "points_to_next_tier": self.points_to_next_tier,
            "tier_progress_percentage": self.tier_progress_percentage,
        }


def get_pass_points_progress(
    pass_points: object, tiers: Sequence[Tier] = DEFAULT_TIERS
) -> PassPointsProgress:
    """Level and tier progress for *pass_points* (clamped like the tier lookup)."""
    points = clamp_points(pass_points, tiers)
    level = calculate_level(points)
    level_floor = (level - 1) * POINTS_PER_LEVEL
    level_ceiling = level * POINTS_PER_LEVEL
    progress_in_level = points - level_floor
    percentage = progress_in_level / POINTS_PER_LEVEL * 100

    tier_info = get_pass_points_for_next_tier(points, tiers)

    return PassPointsProgress(
        current_level=level,
        current_pass_points=points,
        progress_in_level=progress_in_level,
        points_needed_for_level=POINTS_PER_LEVEL,
        points_needed=level_ceiling - points,
        progress_percentage=min(percentage, 100.0),
        tier=tier_info.current_tier,
        next_tier=tier_info.next_tier,
        points_to_next_tier=tier_info.points_needed,
        tier_progress_percentage=tier_progress_percent(points, tiers),
    )
