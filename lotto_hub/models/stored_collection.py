"""Stored collection ORM model (sql store backend)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from lotto_hub.models.base import Base


class StoredCollection(Base):
    """One row per persisted collection; payload holds the serialized JSON."""

    __tablename__ = "stored_collections"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    payload: Mapped[object] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
