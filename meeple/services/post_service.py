"""
meeple.services.post_service — Post Vote Ledger
================================================

Creates per-post vote records and applies vote submissions atomically per
post.  The store passed in must be scoped to posts (namespace ``posts``).

Awarding ``POST_GETS_LIKE`` to the author is the caller's job; this module
only keeps the tallies.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from meeple.engine.records import PostVoteState, VoteType, as_aware
from meeple.engine.votes import apply_vote
from meeple.services.store import RecordStore

logger = logging.getLogger(__name__)


def create_post(
    store: RecordStore,
    post_id: str,
    *,
    author_id: str | None = None,
    author_name: str | None = None,
) -> PostVoteState:
    """Create an empty vote record for *post_id*.

    Returns the existing record unchanged if the post is already known.
    """

    def _create(current: dict | None) -> tuple[dict | None, PostVoteState]:
        if current is not None:
            return None, PostVoteState.from_dict(current)
        post = PostVoteState(post_id=post_id, author_id=author_id, author_name=author_name)
        return post.to_dict(), post

    return store.update(post_id, _create)


def get_post(store: RecordStore, post_id: str) -> PostVoteState | None:
    raw = store.get(post_id)
    return PostVoteState.from_dict(raw) if raw is not None else None


def get_user_vote(store: RecordStore, post_id: str, user_id: str) -> VoteType | None:
    post = get_post(store, post_id)
    return post.vote_of(user_id) if post else None


def update_post_vote(
    store: RecordStore,
    post_id: str,
    vote_type: VoteType | str | None,
    user_id: str,
    *,
    now: datetime | None = None,
) -> PostVoteState | None:
    """Apply *user_id*'s vote submission to *post_id*.

    Same vote twice toggles it off; the opposite vote switches it; None
    clears it.  Returns the updated post, or None if the post does not
    exist.
    """
    submitted = VoteType(vote_type) if vote_type is not None else None
    timestamp = as_aware(now) if now is not None else datetime.now(UTC)

    def _vote(current: dict | None) -> tuple[dict | None, PostVoteState | None]:
        if current is None:
            return None, None
        post = apply_vote(PostVoteState.from_dict(current), user_id, submitted, timestamp)
        return post.to_dict(), post

    post = store.update(post_id, _vote)
    if post is None:
        logger.debug("Vote on unknown post %s ignored", post_id)
    return post
