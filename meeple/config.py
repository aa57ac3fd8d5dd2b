"""
meeple.config — YAML Configuration Loader
==========================================

Reads ``config.yaml`` for engine tuning and identity settings.  Secrets and
infrastructure (``DATABASE_URL``, ``CORS_ALLOW_ORIGINS``) stay in the
environment / ``.env``.

Usage::

    from meeple.config import load_config

    cfg = load_config()               # reads ./config.yaml by default
    print(cfg.spam_window_seconds)    # 5
    print(cfg.day_boundary)           # DayBoundary.LOCAL
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from meeple.engine.limits import DayBoundary
from meeple.engine.reward import DEFAULT_SPAM_WINDOW_SECONDS


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class MeepleConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    community_name: str = "Meeple"

    # Award engine
    spam_window_seconds: float = DEFAULT_SPAM_WINDOW_SECONDS
    day_boundary: DayBoundary = DayBoundary.LOCAL

    # Read-side defaults
    history_limit: int = 50
    leaderboard_limit: int = 10

    # API
    api_port: int = 8000


DEFAULT_CONFIG = MeepleConfig()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> MeepleConfig:
    """Read *path* and return a :class:`MeepleConfig` instance.

    Every key is optional; missing keys keep their defaults.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    ValueError
        If ``day_boundary`` is not ``local`` or ``utc``.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    return MeepleConfig(
        community_name=raw.get("community_name", DEFAULT_CONFIG.community_name),
        spam_window_seconds=float(
            raw.get("spam_window_seconds", DEFAULT_CONFIG.spam_window_seconds)
        ),
        day_boundary=DayBoundary(
            str(raw.get("day_boundary", DEFAULT_CONFIG.day_boundary)).lower()
        ),
        history_limit=int(raw.get("history_limit", DEFAULT_CONFIG.history_limit)),
        leaderboard_limit=int(
            raw.get("leaderboard_limit", DEFAULT_CONFIG.leaderboard_limit)
        ),
        api_port=int(raw.get("api_port", DEFAULT_CONFIG.api_port)),
    )
