"""
studypass.api.routes.admin — Admin-only mutations
===================================================
Every endpoint requires a Bearer JWT with ``is_admin``.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from studypass.api.deps import AdminDep, ConfigDep, EngineDep
from studypass.engine.rewards import UnknownReasonError
from studypass.services import pass_points_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


class AwardRequest(BaseModel):
    wallet_address: str = Field(min_length=1, max_length=64)
    reason: str
    notify: bool = True


class SessionRequest(BaseModel):
    wallet_address: str = Field(min_length=1, max_length=64)
    duration_minutes: int = Field(ge=0)
    partner_rating: int | None = Field(default=None, ge=1, le=5)


@router.post("/award")
def award(body: AwardRequest, admin: AdminDep, engine: EngineDep, cfg: ConfigDep):
    """Award Pass Points for a named reason."""
    try:
        result = pass_points_service.award_pass_points(
            engine,
            body.wallet_address,
            body.reason,
            notify=body.notify and cfg.notifications_enabled,
        )
    except UnknownReasonError as exc:
        raise HTTPException(422, str(exc))
    logger.info("Admin %s awarded %s to %s", admin.get("sub"), body.reason, body.wallet_address)
    return result.to_dict()


@router.post("/sessions")
def record_session(body: SessionRequest, admin: AdminDep, engine: EngineDep, cfg: ConfigDep):
    """Record a completed study session and apply its bonuses."""
    results = pass_points_service.update_session_stats(
        engine,
        body.wallet_address,
        body.duration_minutes,
        body.partner_rating,
        notify=cfg.notifications_enabled,
    )
    return {"awards": [r.to_dict() for r in results]}
