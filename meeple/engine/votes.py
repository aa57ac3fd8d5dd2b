"""
meeple.engine.votes — Post Vote Toggle State Machine
=====================================================

Each (post, user) pair is in one of three states: no vote, ``up``, ``down``.

* Submitting the vote the user already holds toggles it off.
* Submitting the opposite vote (or any vote from no vote) switches to it,
  moving one count from the old tally to the new one.
* Submitting ``None`` clears whatever vote the user holds.

Pure state transition — the post service wraps it in an atomic store update.
"""

from __future__ import annotations

from datetime import datetime

from meeple.engine.records import PostVoteState, UserVote, VoteType

__all__ = ["apply_vote", "next_vote"]


def next_vote(current: VoteType | None, submitted: VoteType | None) -> VoteType | None:
    """The user's vote after submitting *submitted* while holding *current*."""
    if submitted is None or current == submitted:
        return None
    return submitted


def apply_vote(
    post: PostVoteState,
    user_id: str,
    submitted: VoteType | None,
    now: datetime,
) -> PostVoteState:
    """Apply one vote submission to *post* in place and return it."""
    current = post.vote_of(user_id)
    new = next_vote(current, submitted)

    if current is VoteType.UP:
        post.upvotes -= 1
    elif current is VoteType.DOWN:
        post.downvotes -= 1

    if new is VoteType.UP:
        post.upvotes += 1
    elif new is VoteType.DOWN:
        post.downvotes += 1

    # A correct ledger never needs this; it keeps legacy data from going negative.
    post.upvotes = max(post.upvotes, 0)
    post.downvotes = max(post.downvotes, 0)

    if new is None:
        post.user_votes.pop(user_id, None)
    else:
        post.user_votes[user_id] = UserVote(vote_type=new, timestamp=now)
    return post
