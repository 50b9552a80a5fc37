"""
tests/test_pass_points_service.py — Pass Points Service Integration Tests
==========================================================================
Service-level tests for award application, notifications, session stats
and leaderboard reads.

Uses an in-memory SQLite database via the shared conftest fixtures.
"""

from __future__ import annotations

import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from studypass.database.engine import run_db
from studypass.database.models import Notification, PointAward, Profile
from studypass.engine.rewards import AwardReason, UnknownReasonError
from studypass.services import pass_points_service

WALLET = "0xabc0000000000000000000000000000000000001"


@pytest.fixture
def engine(db_engine):
    """Re-use the shared conftest db_engine (SQLite, StaticPool)."""
    return db_engine


def _seed_profile(engine, points: int = 0, wallet: str = WALLET, **kwargs) -> None:
    with Session(engine) as session:
        session.add(Profile(wallet_address=wallet, pass_points=points, **kwargs))
        session.commit()


def _notifications(engine, wallet: str = WALLET) -> list[Notification]:
    with Session(engine) as session:
        return list(session.scalars(
            select(Notification).where(Notification.user_wallet == wallet).order_by(Notification.id)
        ).all())


class TestAwardPassPoints:
    def test_creates_profile_on_first_award(self, engine):
        result = pass_points_service.award_pass_points(engine, WALLET, "session_completed")

        assert result.amount == 100
        with Session(engine) as session:
            profile = session.get(Profile, WALLET)
            assert profile is not None
            assert profile.pass_points == 100
            assert profile.level == 1

    def test_adds_to_existing_balance(self, engine):
        _seed_profile(engine, points=400)
        result = pass_points_service.award_pass_points(engine, WALLET, AwardReason.PARTNER_HELPED)

        assert result.old_points == 400
        assert result.new_points == 475
        with Session(engine) as session:
            assert session.get(Profile, WALLET).pass_points == 475

    def test_writes_ledger_row(self, engine):
        pass_points_service.award_pass_points(engine, WALLET, "EMAIL_VERIFIED")
        with Session(engine) as session:
            award = session.scalar(select(PointAward))
            assert award.reason == "email_verified"
            assert award.amount == 50
            assert award.balance_after == 50

    def test_tier_and_level_change_notify(self, engine):
        _seed_profile(engine, points=950)
        result = pass_points_service.award_pass_points(engine, WALLET, "session_completed")

        assert result.tier_changed
        assert result.leveled_up
        notes = _notifications(engine)
        assert [n.type for n in notes] == ["milestone_reached", "milestone_reached"]
        assert "Level 2" in notes[0].message
        assert notes[0].data == {"level": 2, "old_level": 1}
        assert "Explorer" in notes[1].message
        assert notes[1].data == {"tier": "Explorer", "old_tier": "Beginner"}

    def test_notify_false_writes_no_notifications(self, engine):
        _seed_profile(engine, points=950)
        pass_points_service.award_pass_points(engine, WALLET, "session_completed", notify=False)
        assert _notifications(engine) == []

    def test_no_notification_within_level(self, engine):
        pass_points_service.award_pass_points(engine, WALLET, "good_review")
        assert _notifications(engine) == []

    def test_unknown_reason_writes_nothing(self, engine):
        with pytest.raises(UnknownReasonError):
            pass_points_service.award_pass_points(engine, WALLET, "bogus")
        with Session(engine) as session:
            assert session.get(Profile, WALLET) is None
            assert session.scalar(select(func.count()).select_from(PointAward)) == 0

    def test_run_db_bridge(self, engine):
        result = asyncio.run(
            run_db(pass_points_service.award_pass_points, engine, WALLET, "milestone")
        )
        assert result.new_points == 150


class TestGetOrCreateProfile:
    def test_locks_existing_row(self, engine, monkeypatch):
        _seed_profile(engine, points=400)
        with Session(engine) as session:
            seen = []
            real_get = session.get

            def recording_get(*args, **kwargs):
                seen.append(kwargs)
                return real_get(*args, **kwargs)

            monkeypatch.setattr(session, "get", recording_get)
            profile = pass_points_service.get_or_create_profile(session, WALLET)
            assert profile.pass_points == 400
            assert seen == [{"with_for_update": True}]

    def test_reuses_row_inserted_concurrently(self, engine, monkeypatch):
        # The first read misses, as if another request inserted the wallet
        # between our SELECT and INSERT.
        _seed_profile(engine, points=400)
        with Session(engine) as session:
            real_get = session.get
            calls = []

            def stale_first_get(*args, **kwargs):
                calls.append(args)
                if len(calls) == 1:
                    return None
                return real_get(*args, **kwargs)

            monkeypatch.setattr(session, "get", stale_first_get)
            profile = pass_points_service.get_or_create_profile(session, WALLET, name="Ada")
            session.commit()

            assert len(calls) == 2
            assert profile.pass_points == 400

        with Session(engine) as session:
            stored = session.get(Profile, WALLET)
            assert stored.pass_points == 400
            assert stored.name == "Ada"
            assert session.scalar(select(func.count()).select_from(Profile)) == 1

    def test_sequential_awards_accumulate(self, engine):
        for _ in range(3):
            pass_points_service.award_pass_points(engine, WALLET, "session_completed")
        with Session(engine) as session:
            assert session.get(Profile, WALLET).pass_points == 300
            assert session.scalar(select(func.count()).select_from(PointAward)) == 3


class TestUpdateSessionStats:
    def test_first_session_with_five_stars(self, engine):
        results = pass_points_service.update_session_stats(engine, WALLET, 90, 5)

        assert [r.reason for r in results] == [
            AwardReason.FIRST_SESSION,
            AwardReason.GOOD_REVIEW,
        ]
        with Session(engine) as session:
            profile = session.get(Profile, WALLET)
            assert profile.sessions_completed == 1
            assert profile.partners_helped == 1
            assert profile.hours_studied == pytest.approx(1.5)
            assert profile.average_rating == pytest.approx(5.0)
            assert profile.pass_points == 175

    def test_fifth_session_streak(self, engine):
        _seed_profile(
            engine,
            points=0,
            sessions_completed=4,
            partners_helped=4,
            hours_studied=4.0,
            average_rating=4.0,
        )
        results = pass_points_service.update_session_stats(engine, WALLET, 30, 3)

        assert [r.reason for r in results] == [AwardReason.STREAK_5]
        with Session(engine) as session:
            profile = session.get(Profile, WALLET)
            assert profile.sessions_completed == 5
            assert profile.hours_studied == pytest.approx(4.5)
            assert profile.average_rating == pytest.approx((4.0 * 4 + 3) / 5)
            assert profile.pass_points == 200

    def test_plain_session_has_no_bonus(self, engine):
        _seed_profile(engine, sessions_completed=2)
        results = pass_points_service.update_session_stats(engine, WALLET, 45)
        assert results == []


class TestReads:
    def test_progress_unknown_profile(self, engine):
        assert pass_points_service.get_profile_progress(engine, "0xnobody") is None

    def test_progress(self, engine):
        _seed_profile(engine, points=3200)
        progress = pass_points_service.get_profile_progress(engine, WALLET)
        assert progress.tier.name == "Scholar"
        assert progress.current_level == 4

    def test_leaderboard_order(self, engine):
        _seed_profile(engine, points=50, wallet="0x1")
        _seed_profile(engine, points=12000, wallet="0x2", name="Ada")
        _seed_profile(engine, points=3000, wallet="0x3")

        board = pass_points_service.get_leaderboard(engine, limit=2)
        assert [row["wallet_address"] for row in board] == ["0x2", "0x3"]
        assert board[0]["rank"] == 1
        assert board[0]["tier"] == "Master"
        assert board[0]["name"] == "Ada"
