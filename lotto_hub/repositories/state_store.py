"""Storage boundary for the persisted collections.

A store only moves JSON-compatible payloads in and out. Turning payloads into
records (and discarding anything malformed) happens in ``load_or_default`` so
every backend gets the same recovery behaviour.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from marshmallow import Schema
from marshmallow import ValidationError as MarshmallowValidationError

from lotto_hub.errors import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StateStore(ABC):
    """Reads and writes named collections."""

    @abstractmethod
    def read(self, name: str) -> Any | None:
        """Return the raw payload, or None when nothing is stored yet.

        Raises StorageError when the backend is unreachable and ValueError when
        the stored bytes cannot be decoded.
        """

    @abstractmethod
    def write_many(self, payloads: Mapping[str, Any]) -> None:
        """Persist several collections together. Raises StorageError."""

    def close(self) -> None:  # pragma: no cover - trivial default
        return None


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """Outcome of loading one collection."""

    value: T
    used_default: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class RecordListLoader:
    """Load a list collection record by record, dropping malformed entries."""

    def __init__(self, schema: Schema) -> None:
        self._schema = schema

    def __call__(self, raw: Any) -> tuple[tuple[Any, ...], list[str]]:
        if not isinstance(raw, list):
            raise MarshmallowValidationError("Expected a list")

        records: list[Any] = []
        errors: list[str] = []
        for index, item in enumerate(raw):
            try:
                records.append(self._schema.load(item))
            except (MarshmallowValidationError, TypeError, ValueError) as exc:
                errors.append(f"entry {index}: {exc}")
        return tuple(records), errors


def load_or_default(
    store: StateStore,
    name: str,
    loader: Callable[[Any], tuple[T, list[str]]],
    default: Callable[[], T],
) -> LoadResult[T]:
    """Load a collection, falling back to ``default()`` instead of raising."""

    try:
        raw = store.read(name)
    except StorageError as exc:
        logger.error("Could not read collection %s: %s", name, exc.details or exc.message)
        return LoadResult(value=default(), used_default=True, errors=[exc.message])
    except ValueError as exc:
        logger.warning("Discarding undecodable collection %s: %s", name, exc)
        return LoadResult(value=default(), used_default=True, errors=[str(exc)])

    if raw is None:
        return LoadResult(value=default(), used_default=True)

    try:
        value, errors = loader(raw)
    except (MarshmallowValidationError, TypeError, ValueError) as exc:
        logger.warning("Discarding malformed collection %s: %s", name, exc)
        return LoadResult(value=default(), used_default=True, errors=[str(exc)])

    for err in errors:
        logger.warning("Discarding malformed record in %s: %s", name, err)
    return LoadResult(value=value, errors=errors)
