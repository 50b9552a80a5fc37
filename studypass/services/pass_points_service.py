"""
studypass.services.pass_points_service — Award Application & Session Stats
============================================================================

Applies engine results to stored profiles.  The pure calculation lives
in :mod:`studypass.engine.rewards`; this module only reads a balance,
asks the engine what an award does to it, and writes the outcome:

1. Add the amount to ``profiles.pass_points`` and recompute ``level``
2. Append a ``point_awards`` ledger row
3. Write ``notifications`` rows for a level-up and for a tier change

Every write opens its own session via ``get_session`` and commits once, so an
award and its notifications land together or not at all.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studypass.constants import tier_style
from studypass.database.engine import get_session
from studypass.database.models import Notification, NotificationType, PointAward, Profile
from studypass.engine.progress import PassPointsProgress, get_pass_points_progress
from studypass.engine.rewards import (
    AwardReason,
    AwardResult,
    evaluate_award,
    resolve_reason,
    running_average_rating,
    session_bonus_reasons,
)
from studypass.engine.tiers import get_user_tier

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


def get_or_create_profile(
    session: Session, wallet_address: str, name: str | None = None
) -> Profile:
    """Fetch or insert a Profile row, locked for the rest of the transaction.

    The row is read ``FOR UPDATE`` (ignored on SQLite) so two concurrent
    awards to one wallet serialize instead of losing an increment.  If a
    concurrent request inserts the same wallet first, the SAVEPOINT is
    rolled back and the winner's row is read instead.
    """
    profile = session.get(Profile, wallet_address, with_for_update=True)
    if profile is None:
        try:
            with session.begin_nested():   # SAVEPOINT
                profile = Profile(
                    wallet_address=wallet_address,
                    name=name,
                    pass_points=0,
                    level=1,
                    sessions_completed=0,
                    hours_studied=0.0,
                    partners_helped=0,
                    average_rating=0.0,
                )
                session.add(profile)
                session.flush()
        except IntegrityError:
            logger.info("Profile %s created concurrently; reusing it", wallet_address)
            profile = session.get(Profile, wallet_address, with_for_update=True)
            if profile is None:
                raise
    if name:
        profile.name = name
    return profile


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
def _level_up_notification(wallet_address: str, result: AwardResult) -> Notification:
    return Notification(
        user_wallet=wallet_address,
        type=NotificationType.MILESTONE_REACHED.value,
        title="\U0001f3c6 Level Up!",  # 🏆
        message=(
            f"Congratulations! You've reached Level {result.new_level}. "
            "Keep building your study streaks!"
        ),
        data={"level": result.new_level, "old_level": result.old_level},
    )


def _tier_change_notification(wallet_address: str, result: AwardResult) -> Notification:
    icon = tier_style(result.new_tier.name).icon
    return Notification(
        user_wallet=wallet_address,
        type=NotificationType.MILESTONE_REACHED.value,
        title=f"{icon} Tier Upgraded!",
        message=f"You've achieved {result.new_tier.name} status! New benefits unlocked.",
        data={"tier": result.new_tier.name, "old_tier": result.old_tier.name},
    )


# ---------------------------------------------------------------------------
# Award application
# ---------------------------------------------------------------------------
def _apply_award(
    session: Session, profile: Profile, reason: AwardReason, *, notify: bool
) -> AwardResult:
    result = evaluate_award(profile.pass_points or 0, reason)

    profile.pass_points = result.new_points
    profile.level = result.new_level
    session.add(PointAward(
        wallet_address=profile.wallet_address,
        reason=result.reason.value,
        amount=result.amount,
        balance_after=result.new_points,
    ))

    if notify:
        if result.leveled_up:
            session.add(_level_up_notification(profile.wallet_address, result))
        if result.tier_changed:
            session.add(_tier_change_notification(profile.wallet_address, result))

    logger.info(
        "Awarded %d Pass Points to %s for %s: %s (balance %d)",
        result.amount, profile.wallet_address, result.reason.value,
        result.description, result.new_points,
    )
    if result.tier_changed:
        logger.info(
            "%s moved from %s to %s",
            profile.wallet_address, result.old_tier.name, result.new_tier.name,
        )
    return result


def award_pass_points(
    engine: Engine,
    wallet_address: str,
    reason: AwardReason | str,
    *,
    notify: bool = True,
) -> AwardResult:
    """Award the fixed amount for *reason* to *wallet_address*.

    The profile is created if it does not exist yet.  Raises
    :class:`~studypass.engine.rewards.UnknownReasonError` before touching
    the database when *reason* is not a known award reason.
    """
    resolved = resolve_reason(reason)
    with get_session(engine) as session:
        profile = get_or_create_profile(session, wallet_address)
        result = _apply_award(session, profile, resolved, notify=notify)
    return result


def update_session_stats(
    engine: Engine,
    wallet_address: str,
    duration_minutes: int,
    partner_rating: int | None = None,
    *,
    notify: bool = True,
) -> list[AwardResult]:
    """Record a completed study session and apply its bonus awards.

    Increments ``sessions_completed`` and ``partners_helped``, adds the
    session length (rounded to a tenth of an hour), folds *partner_rating*
    into the running average, then applies every bonus returned by
    :func:`~studypass.engine.rewards.session_bonus_reasons`.
    """
    with get_session(engine) as session:
        profile = get_or_create_profile(session, wallet_address)

        sessions_completed = (profile.sessions_completed or 0) + 1
        profile.sessions_completed = sessions_completed
        profile.hours_studied = (profile.hours_studied or 0.0) + round(
            duration_minutes / 60, 1
        )
        profile.partners_helped = (profile.partners_helped or 0) + 1
        profile.average_rating = running_average_rating(
            profile.average_rating or 0.0, sessions_completed, partner_rating
        )

        results = [
            _apply_award(session, profile, reason, notify=notify)
            for reason in session_bonus_reasons(sessions_completed, partner_rating)
        ]

    logger.info(
        "Session recorded for %s (%d total, %d bonus awards)",
        wallet_address, sessions_completed, len(results),
    )
    return results


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
def get_profile_progress(engine: Engine, wallet_address: str) -> PassPointsProgress | None:
    """Level/tier progress for a stored profile, or ``None`` if unknown."""
    with Session(engine) as session:
        profile = session.get(Profile, wallet_address)
        if profile is None:
            return None
        return get_pass_points_progress(profile.pass_points or 0)


def get_leaderboard(engine: Engine, limit: int = 20) -> list[dict]:
    """Top profiles by Pass Points balance."""
    with Session(engine) as session:
        rows = session.scalars(
            select(Profile)
            .order_by(Profile.pass_points.desc(), Profile.wallet_address)
            .limit(limit)
        ).all()
        return [
            {
                "rank": i + 1,
                "wallet_address": p.wallet_address,
                "name": p.name,
                "pass_points": p.pass_points,
                "level": p.level,
                "tier": get_user_tier(p.pass_points or 0).name,
            }
            for i, p in enumerate(rows)
        ]
