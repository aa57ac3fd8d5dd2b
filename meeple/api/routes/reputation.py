"""
meeple.api.routes.reputation — XP ledger endpoints
===================================================
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from meeple.api.deps import get_config, get_xp_store
from meeple.config import MeepleConfig
from meeple.database.engine import run_db
from meeple.engine.records import UserXPRecord
from meeple.engine.reward import AwardResult
from meeple.services import reputation_service
from meeple.services.store import RecordStore

router = APIRouter(prefix="/reputation", tags=["reputation"])
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class AwardRequest(BaseModel):
    user_id: str = Field(min_length=1)
    username: str = Field(min_length=1)
    action: str = Field(min_length=1)
    related_id: str | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _user_dict(u: UserXPRecord, *, with_history: bool = False) -> dict:
    data = {
        "user_id": u.user_id,
        "username": u.username,
        "xp": u.xp,
        "level": u.level,
        "level_name": u.level_name,
        "last_login": u.last_login.isoformat() if u.last_login else None,
    }
    if with_history:
        data["actions"] = [e.to_dict() for e in u.actions]
    return data


def _award_dict(result: AwardResult) -> dict:
    return {
        "user": _user_dict(result.user_xp) if result.user_xp else None,
        "leveled_up": result.leveled_up,
        "new_level": result.new_level,
        "daily_limit_reached": result.daily_limit_reached,
        "spam_blocked": result.spam_blocked,
        "xp_awarded": result.xp_awarded,
        "xp_cap_reached": result.xp_cap_reached,
        "unlocked_assets": [u.requirement.to_dict() for u in result.unlocked_assets],
    }


# ---------------------------------------------------------------------------
# GET /reputation
# ---------------------------------------------------------------------------
@router.get("")
async def all_users(store: RecordStore = Depends(get_xp_store)):
    """Every user's XP record, without history."""
    users = await run_db(reputation_service.get_all_users_xp, store)
    return {"users": [_user_dict(u) for u in users]}


# ---------------------------------------------------------------------------
# GET /reputation/top
# ---------------------------------------------------------------------------
@router.get("/top")
async def top_users(
    limit: int | None = Query(None, ge=1, le=100),
    store: RecordStore = Depends(get_xp_store),
    cfg: MeepleConfig = Depends(get_config),
):
    """Leaderboard by XP."""
    users = await run_db(
        reputation_service.get_top_users_by_xp, store, limit or cfg.leaderboard_limit
    )
    return {"users": [_user_dict(u) for u in users]}


# ---------------------------------------------------------------------------
# POST /reputation/award
# ---------------------------------------------------------------------------
@router.post("/award")
async def award(
    body: AwardRequest,
    store: RecordStore = Depends(get_xp_store),
    cfg: MeepleConfig = Depends(get_config),
):
    """Award an action to a user and report the outcome."""
    result = await run_db(
        reputation_service.award_xp,
        store,
        body.user_id,
        body.username,
        body.action,
        body.related_id,
        config=cfg,
    )
    if result.user_xp is None:
        raise HTTPException(400, f"Unknown action: {body.action}")
    return _award_dict(result)


# ---------------------------------------------------------------------------
# GET /reputation/{user_id}[/…]
# ---------------------------------------------------------------------------
@router.get("/{user_id}")
async def get_user(user_id: str, store: RecordStore = Depends(get_xp_store)):
    user = await run_db(reputation_service.get_user_xp, store, user_id)
    if user is None:
        raise HTTPException(404, "User not found")
    return {"user": _user_dict(user, with_history=True)}


@router.get("/{user_id}/history")
async def get_history(
    user_id: str,
    limit: int | None = Query(None, ge=1, le=500),
    store: RecordStore = Depends(get_xp_store),
    cfg: MeepleConfig = Depends(get_config),
):
    history = await run_db(
        reputation_service.get_user_xp_history,
        store,
        user_id,
        limit or cfg.history_limit,
    )
    return {"history": [e.to_dict() for e in history]}


@router.get("/{user_id}/progress")
async def get_progress(user_id: str, store: RecordStore = Depends(get_xp_store)):
    progress = await run_db(reputation_service.get_level_progress, store, user_id)
    return {"progress": progress.to_dict()}


@router.get("/{user_id}/can-login")
async def can_login(
    user_id: str,
    store: RecordStore = Depends(get_xp_store),
    cfg: MeepleConfig = Depends(get_config),
):
    allowed = await run_db(
        reputation_service.can_perform_daily_login, store, user_id, config=cfg
    )
    return {"can_login": allowed}
