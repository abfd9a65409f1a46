"""MongoDB-backed store: every collection lives in one document of the ``state`` collection."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pymongo.database import Database
from pymongo.errors import PyMongoError

from lotto_hub.errors import StorageError
from lotto_hub.repositories.state_store import StateStore

STATE_DOCUMENT_ID = "lotto-hub"


class MongoStore(StateStore):
    def __init__(self, db: Database, collection: str = "state", document_id: str = STATE_DOCUMENT_ID) -> None:
        self._db = db
        self._collection = db[collection]
        self._doc_id = document_id

    def read(self, name: str) -> Any | None:
        try:
            doc = self._collection.find_one({"_id": self._doc_id})
        except PyMongoError as exc:
            raise StorageError(details=str(exc)) from exc
        if not doc:
            return None
        return (doc.get("collections") or {}).get(name)

    def write_many(self, payloads: Mapping[str, Any]) -> None:
        if not payloads:
            return
        # One update on one document, so MongoDB applies all fields or none.
        fields: dict[str, Any] = {f"collections.{name}": payload for name, payload in payloads.items()}
        fields["updated_at"] = datetime.now(timezone.utc)
        try:
            self._collection.update_one({"_id": self._doc_id}, {"$set": fields}, upsert=True)
        except PyMongoError as exc:
            raise StorageError(details=str(exc)) from exc

    def close(self) -> None:
        self._db.client.close()
