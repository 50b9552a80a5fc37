"""
studypass.engine.tiers — Tier Table & Tier Lookup
===================================================

Pure lookup over a Pass Points balance.  No DB I/O, no display data.

Tiers are half-open ranges ``[min_points, max_points)``; the last tier
is unbounded (``max_points is None``).  A tier table must cover
``[0, +inf)`` with no gaps and no overlaps.  Every function takes the
table as an argument (defaulting to :data:`DEFAULT_TIERS`) so callers
can supply their own without touching module state.

Icons, colours and benefit text live in :mod:`studypass.constants`,
keyed by tier name.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

__all__ = [
    "DEFAULT_TIERS",
    "NextTier",
    "Tier",
    "clamp_points",
    "get_pass_points_for_next_tier",
    "get_tier_by_name",
    "get_user_tier",
    "tier_progress_percent",
    "validate_tiers",
]


# ---------------------------------------------------------------------------
# Tier — one named bracket of the points range
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class Tier:
    """A named bracket ``[min_points, max_points)`` of the points range."""

    name: str
    min_points: int
    max_points: int | None = None  # None → unbounded

    @property
    def unbounded(self) -> bool:
        return self.max_points is None

    def contains(self, points: int) -> bool:
        if points < self.min_points:
            return False
        return self.max_points is None or points < self.max_points


@dataclass(frozen=True, slots=True)
class NextTier:
    """Result of :func:`get_pass_points_for_next_tier`."""

    current_tier: Tier
    next_tier: Tier | None
    points_needed: int


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
def validate_tiers(tiers: Sequence[Tier]) -> tuple[Tier, ...]:
    """Check that *tiers* covers ``[0, +inf)`` contiguously.

    Returns the tiers as a tuple.

    Raises
    ------
    ValueError
        If the table is empty, does not start at 0, has a gap or an
        overlap, has an empty range, or is not unbounded at the top.
    """
    table = tuple(tiers)
    if not table:
        raise ValueError("Tier table is empty")
    if table[0].min_points != 0:
        raise ValueError(
            f"First tier {table[0].name!r} must start at 0, not {table[0].min_points}"
        )

    names: set[str] = set()
    for i, tier in enumerate(table):
        if tier.name in names:
            raise ValueError(f"Duplicate tier name {tier.name!r}")
        names.add(tier.name)

        is_last = i == len(table) - 1
        if tier.max_points is None:
            if not is_last:
                raise ValueError(f"Only the last tier may be unbounded ({tier.name!r})")
            continue
        if is_last:
            raise ValueError(f"Last tier {tier.name!r} must be unbounded")
        if tier.max_points <= tier.min_points:
            raise ValueError(f"Tier {tier.name!r} has an empty range")
        following = table[i + 1]
        if tier.max_points != following.min_points:
            raise ValueError(
                f"Tiers {tier.name!r} and {following.name!r} are not contiguous "
                f"({tier.max_points} != {following.min_points})"
            )
    return table


# ---------------------------------------------------------------------------
# Default table — Beginner → Master
# ---------------------------------------------------------------------------
DEFAULT_TIERS: tuple[Tier, ...] = validate_tiers((
    Tier("Beginner", 0, 1000),
    Tier("Explorer", 1000, 3000),
    Tier("Scholar", 3000, 6000),
    Tier("Expert", 6000, 10000),
    Tier("Master", 10000, None),
))


# ---------------------------------------------------------------------------
# Balance normalisation
# ---------------------------------------------------------------------------
def clamp_points(value: object, tiers: Sequence[Tier] = DEFAULT_TIERS) -> int:
    """Normalise a raw balance to a non-negative ``int``.

    Negative, missing (``None``), non-numeric and NaN balances become 0.
    ``+inf`` and values too large for a float land on the floor of the
    top tier.  Never raises.
    """
    if isinstance(value, int):
        return max(value, 0)
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    except OverflowError:
        return tiers[-1].min_points
    if math.isnan(number) or number <= 0:
        return 0
    if math.isinf(number):
        return tiers[-1].min_points
    return int(number)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------
def get_user_tier(pass_points: object, tiers: Sequence[Tier] = DEFAULT_TIERS) -> Tier:
    """Return the tier whose range contains *pass_points*.

    The balance goes through :func:`clamp_points` first.
    """
    points = clamp_points(pass_points, tiers)
    for tier in tiers:
        if tier.contains(points):
            return tier
    return tiers[0]


def get_pass_points_for_next_tier(
    pass_points: object, tiers: Sequence[Tier] = DEFAULT_TIERS
) -> NextTier:
    """Return the current tier, the tier after it, and the points still needed.

    In the last tier ``next_tier`` is ``None`` and ``points_needed`` is 0.
    """
    points = clamp_points(pass_points, tiers)
    current = get_user_tier(points, tiers)
    index = list(tiers).index(current)
    if current.unbounded:
        return NextTier(current_tier=current, next_tier=None, points_needed=0)

    following = tiers[index + 1]
    return NextTier(
        current_tier=current,
        next_tier=following,
        points_needed=following.min_points - points,
    )


def tier_progress_percent(
    pass_points: object, tiers: Sequence[Tier] = DEFAULT_TIERS
) -> float | None:
    """Percentage of the way through the current tier.

    ``None`` for the unbounded last tier.
    """
    points = clamp_points(pass_points, tiers)
    tier = get_user_tier(points, tiers)
    if tier.unbounded:
        return None
    span = tier.max_points - tier.min_points
    return (points - tier.min_points) / span * 100


def get_tier_by_name(name: str, tiers: Sequence[Tier] = DEFAULT_TIERS) -> Tier:
    """Look a tier up by name.  Raises ``KeyError`` if absent."""
    for tier in tiers:
        if tier.name == name:
            return tier
    raise KeyError(name)
