"""
studypass.constants — Shared Constants & Display Data
======================================================

Single source of truth for presentation constants (tier icons, colours,
benefits) and the level size.  The numeric tier table lives in
:mod:`studypass.engine.tiers`; display data is looked up here by tier name.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------
POINTS_PER_LEVEL = 1000


# ---------------------------------------------------------------------------
# Tier presentation (used by the API and notification text)
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class TierStyle:
    """Display decoration for one tier."""

    icon: str
    color: str
    benefits: tuple[str, ...] = ()


TIER_STYLES: dict[str, TierStyle] = {
    "Beginner": TierStyle(
        icon="\U0001f331",  # 🌱
        color="text-gray-500",
        benefits=("Basic matching", "Profile creation"),
    ),
    "Explorer": TierStyle(
        icon="\U0001f50d",  # 🔍
        color="text-blue-500",
        benefits=("Priority matching", "Custom study goals", "Basic badges"),
    ),
    "Scholar": TierStyle(
        icon="\U0001f4da",  # 📚
        color="text-purple-500",
        benefits=("Advanced matching", "Exclusive study groups", "Special badges"),
    ),
    "Expert": TierStyle(
        icon="\u2b50",  # ⭐
        color="text-orange-500",
        benefits=(
            "VIP matching",
            "Mentor status",
            "Premium features",
            "Exclusive NFTs",
        ),
    ),
    "Master": TierStyle(
        icon="\U0001f451",  # 👑
        color="text-yellow-500",
        benefits=(
            "Ultimate priority",
            "Community leader",
            "All features unlocked",
            "Legendary NFTs",
        ),
    ),
}

DEFAULT_TIER_STYLE = TierStyle(icon="\U0001f3c5", color="text-gray-500")  # 🏅


def tier_style(name: str) -> TierStyle:
    """Display style for tier *name*; a neutral style if the name is unknown."""
    return TIER_STYLES.get(name, DEFAULT_TIER_STYLE)
