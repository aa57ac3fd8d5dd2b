"""
meeple.api.deps — FastAPI dependency injection
===============================================
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from sqlalchemy import Engine

from meeple.config import DEFAULT_CONFIG, MeepleConfig, load_config
from meeple.database.engine import create_db_engine, init_db
from meeple.services.store import RecordStore, SqlStore

logger = logging.getLogger(__name__)

XP_NAMESPACE = "xp"
POSTS_NAMESPACE = "posts"


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    engine = create_db_engine()
    init_db(engine)
    return engine


@lru_cache(maxsize=1)
def get_config() -> MeepleConfig:
    if not Path("config.yaml").exists():
        logger.warning("config.yaml not found — using built-in defaults")
        return DEFAULT_CONFIG
    return load_config()


@lru_cache(maxsize=1)
def get_xp_store() -> RecordStore:
    return SqlStore(get_engine(), XP_NAMESPACE)


@lru_cache(maxsize=1)
def get_post_store() -> RecordStore:
    return SqlStore(get_engine(), POSTS_NAMESPACE)
