"""
studypass.engine.rewards — Award Reasons & Award Evaluation
=============================================================

Pure reward table and award evaluation.  No DB I/O inside the engine;
applying an award to a stored balance is the job of
:mod:`studypass.services.pass_points_service`.

Pipeline for one award::

    reason → amount → old/new balance → old/new tier + level → AwardResult
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass

from studypass.engine.progress import calculate_level
from studypass.engine.tiers import DEFAULT_TIERS, Tier, clamp_points, get_user_tier

__all__ = [
    "PASS_POINTS_REWARDS",
    "AwardReason",
    "AwardResult",
    "PassPointsReward",
    "UnknownReasonError",
    "award_pass_points",
    "evaluate_award",
    "resolve_reason",
    "running_average_rating",
    "session_bonus_reasons",
]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
class UnknownReasonError(LookupError):
    """Raised when an award reason is not in :class:`AwardReason`."""

    def __init__(self, reason: object) -> None:
        self.reason = reason
        super().__init__(f"Unknown award reason: {reason!r}")


# ---------------------------------------------------------------------------
# Reward table
# ---------------------------------------------------------------------------
class AwardReason(enum.StrEnum):
    """Every trigger that can earn Pass Points."""
    SESSION_COMPLETED = "session_completed"
    GOOD_REVIEW = "good_review"
    MILESTONE = "milestone"
    FIRST_SESSION = "first_session"
    STREAK_5 = "streak_5"
    STREAK_10 = "streak_10"
    EMAIL_VERIFIED = "email_verified"
    PROFILE_COMPLETED = "profile_completed"
    PARTNER_HELPED = "partner_helped"


@dataclass(frozen=True, slots=True)
class PassPointsReward:
    reason: AwardReason
    amount: int
    description: str


PASS_POINTS_REWARDS: dict[AwardReason, PassPointsReward] = {
    r.reason: r
    for r in (
        PassPointsReward(AwardReason.SESSION_COMPLETED, 100, "Completed a study session"),
        PassPointsReward(AwardReason.GOOD_REVIEW, 25, "Received 5-star rating"),
        PassPointsReward(AwardReason.MILESTONE, 150, "Reached a study milestone"),
        PassPointsReward(AwardReason.FIRST_SESSION, 150, "First study session completed"),
        PassPointsReward(AwardReason.STREAK_5, 200, "5 sessions in a row"),
        PassPointsReward(AwardReason.STREAK_10, 500, "10 sessions in a row"),
        PassPointsReward(AwardReason.EMAIL_VERIFIED, 50, "Email verified"),
        PassPointsReward(
            AwardReason.PROFILE_COMPLETED, 50, "Profile completed and badge minted"
        ),
        PassPointsReward(AwardReason.PARTNER_HELPED, 75, "Helped a study partner"),
    )
}


def resolve_reason(reason: AwardReason | str) -> AwardReason:
    """Coerce *reason* to an :class:`AwardReason`.

    Accepts the enum itself, its value (``"session_completed"``) or its
    name (``"SESSION_COMPLETED"``).
    """
    if isinstance(reason, AwardReason):
        return reason
    if isinstance(reason, str):
        try:
            return AwardReason(reason)
        except ValueError:
            pass
        try:
            return AwardReason[reason]
        except KeyError:
            pass
    raise UnknownReasonError(reason)


def award_pass_points(reason: AwardReason | str) -> int:
    """Fixed Pass Points amount for *reason*.

    Raises :class:`UnknownReasonError` for anything outside the table.
    """
    return PASS_POINTS_REWARDS[resolve_reason(reason)].amount


# ---------------------------------------------------------------------------
# AwardResult — what applying one award would do to a balance
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class AwardResult:
    """Outcome of adding one award to a balance."""

    reason: AwardReason
    amount: int
    old_points: int
    new_points: int
    old_tier: Tier
    new_tier: Tier
    old_level: int
    new_level: int

    @property
    def tier_changed(self) -> bool:
        return self.old_tier.name != self.new_tier.name

    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.old_level

    @property
    def description(self) -> str:
        return PASS_POINTS_REWARDS[self.reason].description

    def to_dict(self) -> dict:
        return {
            "reason": self.reason.value,
            "amount": self.amount,
            "description": self.description,
            "old_points": self.old_points,
            "new_points": self.new_points,
            "old_tier": self.old_tier.name,
            "new_tier": self.new_tier.name,
            "old_level": self.old_level,
            "new_level": self.new_level,
            "tier_changed": self.tier_changed,
            "leveled_up": self.leveled_up,
        }


def evaluate_award(
    current_points: object,
    reason: AwardReason | str,
    tiers: Sequence[Tier] = DEFAULT_TIERS,
) -> AwardResult:
    """Compute the effect of awarding *reason* on a balance.

    This is a PURE function: nothing is persisted.
    """
    resolved = resolve_reason(reason)
    amount = PASS_POINTS_REWARDS[resolved].amount
    old_points = clamp_points(current_points, tiers)
    new_points = old_points + amount
    return AwardResult(
        reason=resolved,
        amount=amount,
        old_points=old_points,
        new_points=new_points,
        old_tier=get_user_tier(old_points, tiers),
        new_tier=get_user_tier(new_points, tiers),
        old_level=calculate_level(old_points),
        new_level=calculate_level(new_points),
    )


# ---------------------------------------------------------------------------
# Session bonuses
# ---------------------------------------------------------------------------
def session_bonus_reasons(
    sessions_completed: int, partner_rating: int | None = None
) -> list[AwardReason]:
    """Bonus awards earned by the session that brought the count to
    *sessions_completed*.

    - first completed session → ``FIRST_SESSION``
    - 5-star partner rating → ``GOOD_REVIEW``
    - exactly 5 / 10 sessions → ``STREAK_5`` / ``STREAK_10``
    """
    reasons: list[AwardReason] = []
    if sessions_completed == 1:
        reasons.append(AwardReason.FIRST_SESSION)
    if partner_rating == 5:
        reasons.append(AwardReason.GOOD_REVIEW)
    if sessions_completed == 5:
        reasons.append(AwardReason.STREAK_5)
    elif sessions_completed == 10:
        reasons.append(AwardReason.STREAK_10)
    return reasons


def running_average_rating(
    previous_average: float, sessions_completed: int, rating: int | None
) -> float:
    """Fold *rating* into an average taken over *sessions_completed* sessions.

    *sessions_completed* already includes the session being rated.  A
    missing rating leaves the average unchanged.
    """
    if not rating or sessions_completed < 1:
        return previous_average
    total = previous_average * (sessions_completed - 1) + rating
    return total / sessions_completed
