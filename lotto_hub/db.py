"""Store backend selection and application-state wiring."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from flask import Flask, current_app
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

from lotto_hub.repositories.json_store import JsonFileStore
from lotto_hub.repositories.state_store import StateStore
from lotto_hub.state import AppState
from lotto_hub.utils.clock import make_clock

logger = logging.getLogger(__name__)

STATE_EXTENSION = "lotto_hub.state"


def create_app_engine(database_url: str) -> Engine:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        # The state object is shared by request threads.
        return create_engine(database_url, connect_args={"check_same_thread": False}, future=True)
    return create_engine(database_url, pool_pre_ping=True, future=True)


def build_store(config: Mapping[str, Any]) -> StateStore:
    """Instantiate the configured store backend ("json" | "sql" | "mongo")."""

    backend = str(config.get("STORE_BACKEND") or "json").lower().strip()
    if backend == "json":
        return JsonFileStore(str(config["DATA_DIR"]))

    if backend == "sql":
        from lotto_hub.repositories.sql_store import SqlStore

        return SqlStore(create_app_engine(str(config["DATABASE_URL"])))

    if backend == "mongo":
        from pymongo import MongoClient

        from lotto_hub.repositories.mongo_store import MongoStore

        client: MongoClient = MongoClient(str(config["MONGODB_URI"]), serverSelectionTimeoutMS=5000)
        return MongoStore(client[str(config["MONGODB_DB"])])

    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")


def init_state(app: Flask, store: StateStore | None = None) -> AppState:
    """Create the application state, load it and attach it to the app."""

    state = AppState(
        store or build_store(app.config),
        clock=make_clock(str(app.config["APP_TIMEZONE"])),
    )
    results = state.load()
    for name, result in results.items():
        if result.errors:
            logger.warning("Collection %s loaded with %d problem(s)", name, len(result.errors))

    app.extensions[STATE_EXTENSION] = state
    return state


def get_state() -> AppState:
    """Get the application state of the current app."""

    state: AppState | None = current_app.extensions.get(STATE_EXTENSION)
    if state is None:
        raise RuntimeError("Application state not initialized")
    return state
