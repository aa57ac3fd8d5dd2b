"""
meeple.database.models — SQLAlchemy 2.0 Data Models
====================================================

The engine persists through a key-value store, so the schema is one table:

- records — JSON payload per (namespace, key); namespaces in use are
  ``xp`` (one UserXPRecord per user) and ``posts`` (one PostVoteState per post)
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all Meeple ORM models."""


# JSONB on PostgreSQL, plain JSON everywhere else (SQLite in tests).
PayloadType = JSON().with_variant(JSONB(), "postgresql")


# ---------------------------------------------------------------------------
# Record: one JSON document per (namespace, key)
# ---------------------------------------------------------------------------
class Record(Base):
    __tablename__ = "records"

    namespace: Mapped[str] = mapped_column(String(32), primary_key=True)
    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    payload: Mapped[dict] = mapped_column(PayloadType, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("ix_records_namespace", "namespace"),
    )

    def __repr__(self) -> str:
        return f"<Record {self.namespace}:{self.key}>"
