"""
Meeple — Reputation & Leveling Engine for a Board-Game Community
==================================================================
Turns community activity (posts, likes, gallery uploads, game votes,
daily logins) into XP and levels, guards the ledger against spam and
daily farming, gates dice-designer cosmetics behind levels, and keeps
per-post vote tallies consistent.

Package layout::

    meeple/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Level table + leveling helpers
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   └── models.py      # Key-value record table
    ├── engine/
    │   ├── actions.py     # XP and reputation action catalogs
    │   ├── limits.py      # Daily limit policy + day boundary
    │   ├── records.py     # UserXPRecord / XPHistoryEntry / PostVoteState
    │   ├── reward.py      # Pure award decision pipeline
    │   ├── votes.py       # Vote toggle state machine
    │   └── assets.py      # Dice asset unlock table
    ├── services/
    │   ├── store.py              # Store interface, memory + SQL stores
    │   ├── reputation_service.py # award_xp + ledger queries
    │   └── post_service.py       # Post vote ledger
    └── api/
        ├── main.py        # FastAPI app
        └── routes/        # Reputation, post and asset endpoints
"""

__version__ = "0.1.0"
