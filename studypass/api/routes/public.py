"""
studypass.api.routes.public — Read-only public endpoints
==========================================================
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from studypass.api.deps import EngineDep
from studypass.constants import tier_style
from studypass.engine.progress import get_pass_points_progress
from studypass.engine.rewards import PASS_POINTS_REWARDS
from studypass.engine.tiers import DEFAULT_TIERS, Tier, get_tier_by_name
from studypass.services import pass_points_service

router = APIRouter(tags=["public"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _tier_dict(tier: Tier | None) -> dict | None:
    if tier is None:
        return None
    style = tier_style(tier.name)
    return {
        "name": tier.name,
        "min_points": tier.min_points,
        "max_points": tier.max_points,
        "icon": style.icon,
        "color": style.color,
        "benefits": list(style.benefits),
    }


# ---------------------------------------------------------------------------
# GET /tiers
# ---------------------------------------------------------------------------
@router.get("/tiers")
def list_tiers():
    """The full tier table with display decoration."""
    return {"tiers": [_tier_dict(t) for t in DEFAULT_TIERS]}


@router.get("/tiers/lookup")
def lookup_tier(points: int = Query(..., description="Pass Points balance")):
    """Tier and progress for an arbitrary balance (negative clamps to 0)."""
    progress = get_pass_points_progress(points)
    return {
        "points": progress.current_pass_points,
        "tier": _tier_dict(progress.tier),
        "next_tier": _tier_dict(progress.next_tier),
        "points_needed": progress.points_to_next_tier,
        "tier_progress_percentage": progress.tier_progress_percentage,
        "level": progress.current_level,
    }


@router.get("/tiers/{name}")
def get_tier(name: str):
    """One tier by name, e.g. ``/tiers/Scholar``."""
    try:
        tier = get_tier_by_name(name)
    except KeyError:
        raise HTTPException(404, "Tier not found")
    return _tier_dict(tier)


# ---------------------------------------------------------------------------
# GET /rewards
# ---------------------------------------------------------------------------
@router.get("/rewards")
def list_rewards():
    return {
        "rewards": [
            {"reason": r.reason.value, "amount": r.amount, "description": r.description}
            for r in PASS_POINTS_REWARDS.values()
        ]
    }


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------
@router.get("/profiles/{wallet_address}/progress")
def profile_progress(wallet_address: str, engine: EngineDep):
    progress = pass_points_service.get_profile_progress(engine, wallet_address)
    if progress is None:
        raise HTTPException(404, "Profile not found")
    return {
        "wallet_address": wallet_address,
        **progress.to_dict(),
        "tier": _tier_dict(progress.tier),
        "next_tier": _tier_dict(progress.next_tier),
    }


@router.get("/leaderboard")
def leaderboard(engine: EngineDep, limit: int = Query(20, ge=1, le=100)):
    """Top members by Pass Points."""
    return {"users": pass_points_service.get_leaderboard(engine, limit)}
