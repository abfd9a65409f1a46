"""SQLAlchemy-backed store: one ``stored_collections`` row per collection."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from lotto_hub.errors import StorageError
from lotto_hub.models.base import Base
from lotto_hub.models.stored_collection import StoredCollection
from lotto_hub.repositories.state_store import StateStore


class SqlStore(StateStore):
    def __init__(self, engine: Engine, create_tables: bool = True) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        if create_tables:
            try:
                Base.metadata.create_all(bind=engine)
            except SQLAlchemyError as exc:
                raise StorageError(details=str(exc)) from exc

    def read(self, name: str) -> Any | None:
        try:
            with self._session_factory() as session:
                row = session.get(StoredCollection, name)
                return None if row is None else row.payload
        except SQLAlchemyError as exc:
            raise StorageError(details=str(exc)) from exc

    def write_many(self, payloads: Mapping[str, Any]) -> None:
        """All payloads are written in a single transaction."""

        now = datetime.now(timezone.utc)
        try:
            with self._session_factory() as session, session.begin():
                for name, payload in payloads.items():
                    session.merge(StoredCollection(name=name, payload=payload, updated_at=now))
        except SQLAlchemyError as exc:
            raise StorageError(details=str(exc)) from exc

    def close(self) -> None:
        self._engine.dispose()
