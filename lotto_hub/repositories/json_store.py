"""Flat JSON file store: every collection lives in one ``state.json`` document."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from lotto_hub.errors import StorageError
from lotto_hub.repositories.state_store import StateStore

logger = logging.getLogger(__name__)

STATE_FILE = "state.json"


class JsonFileStore(StateStore):
    def __init__(self, data_dir: str | os.PathLike[str]) -> None:
        self._dir = Path(data_dir)

    @property
    def path(self) -> Path:
        return self._dir / STATE_FILE

    def _read_all(self) -> dict[str, Any] | None:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(details=f"{self.path}: {exc}") from exc
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path}: expected an object, got {type(data).__name__}")
        return data

    def read(self, name: str) -> Any | None:
        data = self._read_all()
        if data is None:
            return None
        return data.get(name)

    def write_many(self, payloads: Mapping[str, Any]) -> None:
        """Merge ``payloads`` into the state file and swap it in with one rename.

        Either every payload lands or the previous file is left as it was.
        """

        if not payloads:
            return
        try:
            current = self._read_all() or {}
        except ValueError:
            logger.warning("Replacing undecodable %s", self.path)
            current = {}
        current.update(payloads)

        tmp: str | None = None
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=".state.", suffix=".tmp", dir=self._dir)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(current, fh, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp is not None:
                try:
                    os.unlink(tmp)
                except OSError:
                    logger.debug("Could not remove temp file %s", tmp)
            raise StorageError(details=str(exc)) from exc
