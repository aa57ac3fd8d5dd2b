"""
meeple.api.routes.posts — Post vote ledger endpoints
=====================================================
"""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from meeple.api.deps import get_config, get_post_store, get_xp_store
from meeple.config import MeepleConfig
from meeple.database.engine import run_db
from meeple.engine.records import PostVoteState, VoteType
from meeple.services import post_service, reputation_service
from meeple.services.store import RecordStore

router = APIRouter(prefix="/posts", tags=["posts"])
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class PostCreate(BaseModel):
    author_id: str | None = None
    author_name: str | None = None


class VoteRequest(BaseModel):
    user_id: str = Field(min_length=1)
    vote_type: Literal["up", "down"] | None


def _post_dict(post: PostVoteState) -> dict:
    return {
        "post_id": post.post_id,
        "votes": {"upvotes": post.upvotes, "downvotes": post.downvotes},
        "user_votes": {uid: v.vote_type.value for uid, v in post.user_votes.items()},
        "author_id": post.author_id,
    }


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------
@router.post("/{post_id}")
async def create_post(
    post_id: str,
    body: PostCreate,
    store: RecordStore = Depends(get_post_store),
):
    post = await run_db(
        post_service.create_post,
        store,
        post_id,
        author_id=body.author_id,
        author_name=body.author_name,
    )
    return {"post": _post_dict(post)}


@router.get("/{post_id}")
async def get_post(post_id: str, store: RecordStore = Depends(get_post_store)):
    post = await run_db(post_service.get_post, store, post_id)
    if post is None:
        raise HTTPException(404, "Post not found")
    return {"post": _post_dict(post)}


@router.post("/{post_id}/vote")
async def vote(
    post_id: str,
    body: VoteRequest,
    store: RecordStore = Depends(get_post_store),
    xp_store: RecordStore = Depends(get_xp_store),
    cfg: MeepleConfig = Depends(get_config),
):
    """Toggle a vote; a fresh upvote credits the post author."""
    post = await run_db(
        post_service.update_post_vote, store, post_id, body.vote_type, body.user_id
    )
    if post is None:
        raise HTTPException(404, "Post not found")

    leveled_up = False
    if (
        post.vote_of(body.user_id) is VoteType.UP
        and post.author_id
        and post.author_id != body.user_id
    ):
        try:
            result = await run_db(
                reputation_service.award_xp,
                xp_store,
                post.author_id,
                post.author_name or post.author_id,
                "POST_GETS_LIKE",
                post_id,
                config=cfg,
            )
        except SQLAlchemyError:
            # The vote is already committed; a failed like credit must not undo it.
            logger.exception("Failed to award like XP to %s for post %s", post.author_id, post_id)
        else:
            leveled_up = result.leveled_up
            if leveled_up:
                logger.info(
                    "%s leveled up to level %s from receiving a like",
                    post.author_name or post.author_id, result.new_level,
                )

    return {"post": _post_dict(post), "author_leveled_up": leveled_up}
