"""
meeple.api.routes.assets — Dice designer asset gating
======================================================
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from meeple.engine.assets import (
    ASSET_LEVEL_REQUIREMENTS,
    can_user_access_asset,
    get_newly_unlocked_assets,
    list_categories,
)

router = APIRouter(prefix="/assets", tags=["assets"])


@router.get("/categories")
def categories():
    return {"categories": list_categories()}


@router.get("/unlocked")
def newly_unlocked(
    old_level: int = Query(..., ge=0),
    new_level: int = Query(..., ge=0),
):
    """Assets unlocked by moving from *old_level* to *new_level*."""
    return {
        "unlocked": [
            u.requirement.to_dict()
            for u in get_newly_unlocked_assets(old_level, new_level)
        ]
    }


@router.get("/{category}")
def list_assets(
    category: str,
    level: int = Query(1, ge=1),
    specials: list[str] | None = Query(None),
):
    """Every asset in *category* with its lock state for *level*."""
    assets = ASSET_LEVEL_REQUIREMENTS.get(category)
    if assets is None:
        raise HTTPException(404, "Unknown asset category")
    return {
        "category": category,
        "assets": [
            {
                **req.to_dict(),
                "locked": not can_user_access_asset(level, category, name, specials or ()),
            }
            for name, req in assets.items()
        ],
    }
