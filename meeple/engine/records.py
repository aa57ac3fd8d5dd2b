"""
meeple.engine.records — Ledger & Vote Records
==============================================

Plain dataclasses for the two persisted record kinds plus their dict
round-trip.  Stores only ever see the ``to_dict()`` form, so any key-value
backend that can hold JSON can hold these.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime

from meeple.constants import calculate_level

__all__ = [
    "as_aware",
    "PostVoteState",
    "UserVote",
    "UserXPRecord",
    "VoteType",
    "XPHistoryEntry",
]


def as_aware(value: datetime) -> datetime:
    """Return *value* with a timezone; naive values are taken as server-local."""
    return value if value.tzinfo is not None else value.astimezone()


def _ts(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_ts(value: str | None) -> datetime | None:
    return as_aware(datetime.fromisoformat(value)) if value else None


# ---------------------------------------------------------------------------
# XP ledger
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class XPHistoryEntry:
    """One append-only line of a user's XP history.

    ``xp`` is what was actually credited, 0 when a daily XP cap applied.
    """

    action: str
    xp: int
    description: str
    timestamp: datetime
    related_id: str | None = None

    def to_dict(self) -> dict:
        return {
            "action": self.action,
            "xp": self.xp,
            "description": self.description,
            "timestamp": _ts(self.timestamp),
            "related_id": self.related_id,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> XPHistoryEntry:
        return cls(
            action=raw["action"],
            xp=int(raw["xp"]),
            description=raw.get("description", ""),
            timestamp=as_aware(datetime.fromisoformat(raw["timestamp"])),
            related_id=raw.get("related_id"),
        )


@dataclass(slots=True)
class UserXPRecord:
    """Per-user ledger: running XP total, cached level, and history.

    ``level`` / ``level_name`` are cached derivations of ``xp``; call
    :meth:`refresh_level` after every change to ``xp``.
    """

    user_id: str
    username: str
    xp: int = 0
    level: int = 1
    level_name: str = "Commoner"
    actions: list[XPHistoryEntry] = field(default_factory=list)
    last_login: datetime | None = None

    def refresh_level(self) -> None:
        definition = calculate_level(self.xp)
        self.level = definition.level
        self.level_name = definition.name

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "xp": self.xp,
            "level": self.level,
            "level_name": self.level_name,
            "actions": [e.to_dict() for e in self.actions],
            "last_login": _ts(self.last_login),
        }

    @classmethod
    def from_dict(cls, raw: dict) -> UserXPRecord:
        record = cls(
            user_id=raw["user_id"],
            username=raw.get("username", ""),
            xp=int(raw.get("xp", 0)),
            actions=[XPHistoryEntry.from_dict(e) for e in raw.get("actions", [])],
            last_login=_parse_ts(raw.get("last_login")),
        )
        # Never trust a stored level; it is always re-derived from XP.
        record.refresh_level()
        return record


# ---------------------------------------------------------------------------
# Post vote ledger
# ---------------------------------------------------------------------------
class VoteType(enum.StrEnum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True, slots=True)
class UserVote:
    vote_type: VoteType
    timestamp: datetime


@dataclass(slots=True)
class PostVoteState:
    """Per-post tallies plus each user's current vote.

    A user appears at most once in ``user_votes``; the tallies always equal
    the number of ``up`` / ``down`` entries.
    """

    post_id: str
    upvotes: int = 0
    downvotes: int = 0
    user_votes: dict[str, UserVote] = field(default_factory=dict)
    author_id: str | None = None
    author_name: str | None = None

    def vote_of(self, user_id: str) -> VoteType | None:
        vote = self.user_votes.get(user_id)
        return vote.vote_type if vote else None

    def to_dict(self) -> dict:
        return {
            "post_id": self.post_id,
            "upvotes": self.upvotes,
            "downvotes": self.downvotes,
            "user_votes": {
                uid: {"vote_type": v.vote_type.value, "timestamp": _ts(v.timestamp)}
                for uid, v in self.user_votes.items()
            },
            "author_id": self.author_id,
            "author_name": self.author_name,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> PostVoteState:
        return cls(
            post_id=raw["post_id"],
            upvotes=int(raw.get("upvotes", 0)),
            downvotes=int(raw.get("downvotes", 0)),
            user_votes={
                uid: UserVote(
                    vote_type=VoteType(v["vote_type"]),
                    timestamp=as_aware(datetime.fromisoformat(v["timestamp"])),
                )
                for uid, v in raw.get("user_votes", {}).items()
            },
            author_id=raw.get("author_id"),
            author_name=raw.get("author_name"),
        )
