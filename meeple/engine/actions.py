"""
meeple.engine.actions — XP and Reputation Action Catalogs
==========================================================

Two catalogs share one set of award mechanics:

* ``XP_ACTIONS`` — the gamified leveling schedule (daily login, game votes,
  discussions, gallery uploads, Dice Throne wins).
* ``REPUTATION_ACTIONS`` — the forum reputation point schedule (posts,
  comments, likes, popularity milestones).  The daily limit policy is
  expressed in this vocabulary.

Both feed the same per-user ledger.  A key present in both catalogs resolves
to its XP-catalog definition.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

__all__ = [
    "ActionDefinition",
    "Catalog",
    "REPUTATION_ACTIONS",
    "XP_ACTIONS",
    "all_action_keys",
    "resolve_action",
]


class Catalog(enum.StrEnum):
    """Which schedule an action definition belongs to."""
    XP = "xp"
    REPUTATION = "reputation"


@dataclass(frozen=True, slots=True)
class ActionDefinition:
    """A named event that may credit XP."""

    key: str
    xp_value: int
    description: str
    catalog: Catalog


def _catalog(catalog: Catalog, rows: list[tuple[str, int, str]]) -> Mapping[str, ActionDefinition]:
    return MappingProxyType({
        key: ActionDefinition(key=key, xp_value=xp, description=desc, catalog=catalog)
        for key, xp, desc in rows
    })


# ---------------------------------------------------------------------------
# Leveling schedule
# ---------------------------------------------------------------------------
XP_ACTIONS: Mapping[str, ActionDefinition] = _catalog(Catalog.XP, [
    ("DAILY_LOGIN", 2, "Daily login"),
    ("VOTE_GAME", 1, "Vote for a game"),
    ("POST_GETS_LIKE", 1, "Like received on your post"),
    ("COMMENT_GETS_LIKE", 1, "Like received on your comment"),
    ("REPLY_DISCUSSION", 1, "Reply to a discussion"),
    ("CREATE_DISCUSSION", 5, "Create a new discussion thread"),
    ("UPLOAD_IMAGE", 10, "Upload an image to the gallery"),
    ("UPLOAD_DIE_DESIGN", 10, "Upload a new die design"),
    ("WIN_DICE_THRONE_VOTE", 20, "Win a Dice Throne vote"),
])

# ---------------------------------------------------------------------------
# Forum reputation schedule (non-negative entries only; nothing deducts XP)
# ---------------------------------------------------------------------------
REPUTATION_ACTIONS: Mapping[str, ActionDefinition] = _catalog(Catalog.REPUTATION, [
    ("CREATE_POST", 5, "Create a forum post"),
    ("CREATE_COMMENT", 1, "Comment on a post"),
    ("COMMENT_GALLERY", 1, "Comment on a gallery image"),
    ("POST_GETS_LIKE", 1, "Like received on your post"),
    ("COMMENT_GETS_LIKE", 1, "Like received on your comment"),
    ("UPLOAD_IMAGE", 10, "Upload an image to the gallery"),
    ("IMAGE_GETS_LIKE", 1, "Like received on your image"),
    ("VOTE_GAME", 1, "Vote for a game"),
    ("VOTE_GAME_UP", 1, "Vote a game up"),
    ("VOTE_GAME_DOWN", 0, "Vote a game down"),
    ("POST_REACHES_10_LIKES", 10, "Your post reached 10 likes"),
    ("POST_REACHES_50_LIKES", 50, "Your post reached 50 likes"),
    ("POST_REACHES_100_LIKES", 100, "Your post reached 100 likes"),
    ("IMAGE_REACHES_10_LIKES", 10, "Your image reached 10 likes"),
    ("IMAGE_REACHES_50_LIKES", 50, "Your image reached 50 likes"),
    ("IMAGE_REACHES_100_LIKES", 100, "Your image reached 100 likes"),
    ("DAILY_LOGIN", 2, "Daily login"),
])


def resolve_action(key: str) -> ActionDefinition | None:
    """Look *key* up in the XP catalog, then the reputation catalog."""
    return XP_ACTIONS.get(key) or REPUTATION_ACTIONS.get(key)


def all_action_keys() -> list[str]:
    """Every key accepted by the award engine, XP catalog first."""
    keys = list(XP_ACTIONS)
    keys.extend(k for k in REPUTATION_ACTIONS if k not in XP_ACTIONS)
    return keys
