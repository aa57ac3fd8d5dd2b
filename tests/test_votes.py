"""
tests/test_votes.py — Post Vote Ledger
=======================================
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime

import pytest

from meeple.engine.records import PostVoteState, UserVote, VoteType
from meeple.engine.votes import apply_vote, next_vote
from meeple.services.post_service import (
    create_post,
    get_post,
    get_user_vote,
    update_post_vote,
)

T0 = datetime(2026, 3, 14, 12, 0, 0, tzinfo=UTC)


def _assert_tallies_match(post: PostVoteState) -> None:
    kinds = [v.vote_type for v in post.user_votes.values()]
    assert post.upvotes == kinds.count(VoteType.UP)
    assert post.downvotes == kinds.count(VoteType.DOWN)


class TestNextVote:
    @pytest.mark.parametrize("current,submitted,expected", [
        (None, VoteType.UP, VoteType.UP),
        (None, VoteType.DOWN, VoteType.DOWN),
        (VoteType.UP, VoteType.UP, None),
        (VoteType.DOWN, VoteType.DOWN, None),
        (VoteType.UP, VoteType.DOWN, VoteType.DOWN),
        (VoteType.DOWN, VoteType.UP, VoteType.UP),
        (VoteType.UP, None, None),
        (None, None, None),
    ])
    def test_transitions(self, current, submitted, expected):
        assert next_vote(current, submitted) is expected


class TestApplyVote:
    def test_switch_moves_count(self):
        post = PostVoteState(post_id="p1")
        apply_vote(post, "u1", VoteType.UP, T0)
        apply_vote(post, "u1", VoteType.DOWN, T0)
        assert (post.upvotes, post.downvotes) == (0, 1)
        _assert_tallies_match(post)

    def test_legacy_negative_counts_clamped(self):
        post = PostVoteState(post_id="p1", upvotes=0)
        post.user_votes["u1"] = UserVote(VoteType.UP, T0)
        apply_vote(post, "u1", VoteType.UP, T0)
        assert post.upvotes == 0
        assert "u1" not in post.user_votes


class TestPostService:
    def test_create_is_idempotent(self, post_store):
        first = create_post(post_store, "p1", author_id="a1", author_name="Ada")
        second = create_post(post_store, "p1", author_id="other")
        assert second.author_id == "a1"
        assert first.to_dict() == second.to_dict()
        assert post_store.writes == 1

    def test_toggle(self, post_store):
        create_post(post_store, "p1")
        post = update_post_vote(post_store, "p1", "up", "u1", now=T0)
        assert (post.upvotes, post.downvotes) == (1, 0)
        assert get_user_vote(post_store, "p1", "u1") is VoteType.UP

        post = update_post_vote(post_store, "p1", "up", "u1", now=T0)
        assert (post.upvotes, post.downvotes) == (0, 0)
        assert get_user_vote(post_store, "p1", "u1") is None

    def test_switch(self, post_store):
        create_post(post_store, "p1")
        update_post_vote(post_store, "p1", VoteType.UP, "u1", now=T0)
        post = update_post_vote(post_store, "p1", VoteType.DOWN, "u1", now=T0)
        assert (post.upvotes, post.downvotes) == (0, 1)
        assert post.vote_of("u1") is VoteType.DOWN

    def test_none_clears(self, post_store):
        create_post(post_store, "p1")
        update_post_vote(post_store, "p1", "down", "u1", now=T0)
        post = update_post_vote(post_store, "p1", None, "u1", now=T0)
        assert (post.upvotes, post.downvotes) == (0, 0)
        assert post.user_votes == {}

    def test_missing_post(self, post_store):
        assert update_post_vote(post_store, "ghost", "up", "u1") is None
        assert get_post(post_store, "ghost") is None
        assert post_store.writes == 0

    def test_invalid_vote_type(self, post_store):
        create_post(post_store, "p1")
        with pytest.raises(ValueError):
            update_post_vote(post_store, "p1", "sideways", "u1")

    def test_many_users_tallies_consistent(self, post_store):
        create_post(post_store, "p1")
        for i in range(20):
            vote = VoteType.UP if i % 3 else VoteType.DOWN
            update_post_vote(post_store, "p1", vote, f"u{i}", now=T0)
        for i in range(0, 20, 4):
            update_post_vote(post_store, "p1", VoteType.UP, f"u{i}", now=T0)
        _assert_tallies_match(get_post(post_store, "p1"))

    def test_concurrent_votes(self, post_store):
        create_post(post_store, "p1")

        def _vote(i: int):
            return update_post_vote(post_store, "p1", "up", f"u{i}", now=T0)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(_vote, range(40)))

        post = get_post(post_store, "p1")
        assert post.upvotes == 40
        _assert_tallies_match(post)
