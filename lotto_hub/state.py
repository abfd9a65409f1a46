"""Application state: the in-memory collections and their persistence.

All mutations go through ``commit`` while holding ``lock``. The new values are
written to the store first and only swapped in once the write succeeded, so a
failing backend leaves the previous state in place.
"""

from __future__ import annotations

import copy
import logging
import threading
from typing import Any

from lotto_hub.models.catalog import AppCustomization, Lottery, SpecialPlay
from lotto_hub.models.result import Winner, WinningResults
from lotto_hub.models.sale import Sale
from lotto_hub.repositories import collections as col
from lotto_hub.repositories.state_store import LoadResult, StateStore, load_or_default
from lotto_hub.utils.clock import Clock

logger = logging.getLogger(__name__)

_ATTRS = {
    "sales": col.SALES,
    "winning_results": col.WINNING_RESULTS,
    "winners": col.WINNERS,
    "lotteries": col.LOTTERIES,
    "special_plays": col.SPECIAL_PLAYS,
    "customization": col.APP_CUSTOMIZATION,
}


class AppState:
    def __init__(self, store: StateStore, clock: Clock) -> None:
        self._store = store
        self.clock = clock
        self.lock = threading.RLock()

        self._sales: tuple[Sale, ...] = ()
        self._winning_results: WinningResults = {}
        self._winners: tuple[Winner, ...] = ()
        self._lotteries: tuple[Lottery, ...] = ()
        self._special_plays: tuple[SpecialPlay, ...] = ()
        self._customization = AppCustomization()
        self._missing: set[str] = set()

    @property
    def sales(self) -> tuple[Sale, ...]:
        return self._sales

    @property
    def winning_results(self) -> WinningResults:
        return copy.deepcopy(self._winning_results)

    @property
    def winners(self) -> tuple[Winner, ...]:
        return self._winners

    @property
    def lotteries(self) -> tuple[Lottery, ...]:
        return self._lotteries

    @property
    def special_plays(self) -> tuple[SpecialPlay, ...]:
        return self._special_plays

    @property
    def customization(self) -> AppCustomization:
        return self._customization

    def was_missing(self, name: str) -> bool:
        """True when the collection had never been stored at load time."""

        return name in self._missing

    def load(self) -> dict[str, LoadResult[Any]]:
        """Load every collection; malformed data falls back to defaults."""

        loaders = {
            col.SALES: (col.load_sales, tuple),
            col.WINNING_RESULTS: (col.load_winning_results, dict),
            col.WINNERS: (col.load_winners, tuple),
            col.LOTTERIES: (col.load_lotteries, tuple),
            col.SPECIAL_PLAYS: (col.load_special_plays, tuple),
            col.APP_CUSTOMIZATION: (col.load_customization, AppCustomization),
        }
        results: dict[str, LoadResult[Any]] = {}
        with self.lock:
            self._missing.clear()
            for attr, name in _ATTRS.items():
                loader, default = loaders[name]
                result = load_or_default(self._store, name, loader, default)
                if result.used_default and not result.errors:
                    self._missing.add(name)
                setattr(self, f"_{attr}", result.value)
                results[name] = result
        logger.info(
            "Loaded state: %d lotteries, %d special plays, %d sales, %d winners",
            len(self._lotteries),
            len(self._special_plays),
            len(self._sales),
            len(self._winners),
        )
        return results

    def commit(self, **changes: Any) -> None:
        """Persist and apply new collection values.

        Keyword names are the attribute names (``sales``, ``winners``,
        ``winning_results``, ``lotteries``, ``special_plays``,
        ``customization``). Raises StorageError, leaving state unchanged.
        """

        unknown = set(changes) - set(_ATTRS)
        if unknown:
            raise TypeError(f"Unknown collections: {sorted(unknown)}")

        with self.lock:
            payloads = {_ATTRS[attr]: col.dump(_ATTRS[attr], value) for attr, value in changes.items()}
            self._store.write_many(payloads)
            for attr, value in changes.items():
                if attr == "winning_results":
                    value = copy.deepcopy(value)
                setattr(self, f"_{attr}", value)
                self._missing.discard(_ATTRS[attr])

    def close(self) -> None:
        self._store.close()
