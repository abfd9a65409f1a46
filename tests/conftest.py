from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from lotto_hub import create_app
from lotto_hub.config import TestingConfig
from lotto_hub.db import STATE_EXTENSION
from lotto_hub.models.catalog import Lottery
from lotto_hub.repositories.json_store import JsonFileStore
from lotto_hub.state import AppState

TZ = ZoneInfo("America/Santo_Domingo")
NOW = datetime(2026, 10, 18, 14, 30, tzinfo=TZ)
TODAY = "2026-10-18"

LOTO_REAL = Lottery(
    id="loto-real",
    name="Loto Real",
    icon="gem",
    number_of_digits=6,
    cost=25.0,
    draw_times=("02:00 PM", "08:00 PM"),
)
PEGA_4 = Lottery(
    id="pega-4-real",
    name="Pega 4 Real",
    icon="diamond",
    number_of_digits=4,
    cost=20.0,
    draw_times=("02:00 PM", "08:00 PM"),
)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:  # type: ignore[no-untyped-def]
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def store(tmp_path) -> JsonFileStore:  # type: ignore[no-untyped-def]
    return JsonFileStore(tmp_path / "data")


@pytest.fixture
def state(store, clock) -> AppState:  # type: ignore[no-untyped-def]
    s = AppState(store, clock=clock)
    s.load()
    s.commit(lotteries=(LOTO_REAL, PEGA_4))
    return s


@pytest.fixture
def app(tmp_path, clock):  # type: ignore[no-untyped-def]
    app = create_app(TestingConfig(DATA_DIR=str(tmp_path / "app-data")))
    s: AppState = app.extensions[STATE_EXTENSION]
    s.clock = clock
    s.commit(lotteries=(LOTO_REAL, PEGA_4))
    return app


@pytest.fixture
def client(app):  # type: ignore[no-untyped-def]
    return app.test_client()
