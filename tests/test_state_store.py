from __future__ import annotations

import json

import mongomock
import pytest
from conftest import LOTO_REAL, NOW, PEGA_4
from pymongo.errors import PyMongoError

from lotto_hub.db import create_app_engine
from lotto_hub.errors import StorageError
from lotto_hub.models.catalog import AppCustomization
from lotto_hub.models.sale import DrawRef, Sale, Ticket
from lotto_hub.repositories import collections as col
from lotto_hub.repositories.json_store import JsonFileStore
from lotto_hub.repositories.mongo_store import STATE_DOCUMENT_ID, MongoStore
from lotto_hub.repositories.sql_store import SqlStore
from lotto_hub.services.results_service import ResultsRegister
from lotto_hub.services.sales_service import SalesLedger
from lotto_hub.state import AppState

SALE = Sale(
    id="S1",
    draws=(DrawRef("loto-real", "02:00 PM"),),
    tickets=(Ticket(id="T1", ticket_number="123456", fractions=2, cost=50.0),),
    total_cost=50.0,
    sold_at=NOW,
    customer_name="Ana",
)


@pytest.fixture(params=["json", "sql", "mongo"])
def any_store(request, tmp_path):
    if request.param == "json":
        yield JsonFileStore(tmp_path / "json")
    elif request.param == "sql":
        store = SqlStore(create_app_engine(f"sqlite:///{tmp_path / 'state.db'}"))
        yield store
        store.close()
    else:
        yield MongoStore(mongomock.MongoClient()["lotto_hub_test"])


def test_empty_store_loads_defaults(any_store, clock):
    state = AppState(any_store, clock=clock)
    results = state.load()

    assert all(r.used_default for r in results.values())
    assert state.was_missing(col.LOTTERIES)
    assert state.sales == ()
    assert state.winning_results == {}
    assert state.customization == AppCustomization()


def test_state_survives_reload(any_store, clock):
    state = AppState(any_store, clock=clock)
    state.load()
    state.commit(
        lotteries=(LOTO_REAL, PEGA_4),
        sales=(SALE,),
        winning_results={"2026-10-18": {"loto-real": {"02:00 PM": ["123456", "", ""]}}},
        customization=AppCustomization(app_name="Banca Ana"),
    )

    reloaded = AppState(any_store, clock=clock)
    reloaded.load()

    assert reloaded.lotteries == (LOTO_REAL, PEGA_4)
    assert reloaded.sales == (SALE,)
    assert reloaded.sales[0].sold_at == NOW
    assert reloaded.winning_results == {"2026-10-18": {"loto-real": {"02:00 PM": ["123456", "", ""]}}}
    assert reloaded.customization.app_name == "Banca Ana"
    assert not reloaded.was_missing(col.LOTTERIES)


def test_malformed_collections_fall_back_to_default(tmp_path, clock):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "state.json").write_text(
        json.dumps({col.SALES: "garbage", col.WINNING_RESULTS: ["wrong", "shape"]}),
        encoding="utf-8",
    )

    state = AppState(JsonFileStore(data_dir), clock=clock)
    results = state.load()

    assert state.sales == ()
    assert state.winning_results == {}
    assert results[col.SALES].errors
    assert results[col.WINNING_RESULTS].errors
    assert not state.was_missing(col.SALES)
    assert state.was_missing(col.LOTTERIES)


def test_undecodable_json_file_falls_back_to_defaults(tmp_path, clock):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "state.json").write_text("{not json", encoding="utf-8")

    store = JsonFileStore(data_dir)
    state = AppState(store, clock=clock)
    results = state.load()

    assert state.sales == ()
    assert all(r.errors for r in results.values())

    state.commit(lotteries=(LOTO_REAL,))
    assert store.read(col.LOTTERIES) == col.dump(col.LOTTERIES, (LOTO_REAL,))


def test_malformed_records_are_dropped_individually(tmp_path, clock):
    store = JsonFileStore(tmp_path / "data")
    good = col.dump(col.SALES, (SALE,))[0]
    store.write_many({col.SALES: [good, {"id": "broken"}, "nonsense"]})

    state = AppState(store, clock=clock)
    results = state.load()

    assert state.sales == (SALE,)
    assert len(results[col.SALES].errors) == 2


def test_json_write_failure_keeps_previous_files(tmp_path, clock):
    store = JsonFileStore(tmp_path / "data")
    state = AppState(store, clock=clock)
    state.load()
    state.commit(lotteries=(LOTO_REAL,))

    with pytest.raises(StorageError):
        store.write_many({col.LOTTERIES: [], col.SALES: [object()]})

    assert store.read(col.LOTTERIES) == col.dump(col.LOTTERIES, (LOTO_REAL,))
    assert not list((tmp_path / "data").glob("*.tmp"))


def test_commit_rejects_unknown_collections(state):
    with pytest.raises(TypeError):
        state.commit(tickets=())


def test_mongo_keeps_every_collection_in_one_document():
    db = mongomock.MongoClient()["lotto_hub_test"]
    store = MongoStore(db)

    store.write_many({col.LOTTERIES: col.dump(col.LOTTERIES, (LOTO_REAL,)), col.SALES: []})

    assert db["state"].count_documents({}) == 1
    doc = db["state"].find_one({"_id": STATE_DOCUMENT_ID})
    assert doc["collections"][col.LOTTERIES][0]["id"] == "loto-real"
    assert store.read(col.SALES) == []
    assert store.read(col.WINNERS) is None


def _resolve_with_failing_store(state, monkeypatch, target, exc):
    SalesLedger().create_sale(state, draws=[DrawRef("loto-real", "02:00 PM")], tickets=[{"ticket_number": "123456"}])

    def fail(*args, **kwargs):
        raise exc

    monkeypatch.setattr(*target, fail)
    with pytest.raises(StorageError):
        ResultsRegister().add_result(state, "loto-real", "02:00 PM", ["123456"])
    monkeypatch.undo()


def test_failed_json_result_write_persists_neither_result_nor_winners(state, store, clock, monkeypatch):
    _resolve_with_failing_store(
        state, monkeypatch, ("lotto_hub.repositories.json_store.os.replace",), OSError("disk full")
    )

    reloaded = AppState(store, clock=clock)
    reloaded.load()

    assert reloaded.winning_results == {}
    assert reloaded.winners == ()
    assert len(reloaded.sales) == 1
    assert not list(store.path.parent.glob("*.tmp"))


def test_failed_mongo_result_write_persists_neither_result_nor_winners(clock, monkeypatch):
    store = MongoStore(mongomock.MongoClient()["lotto_hub_test"])
    state = AppState(store, clock=clock)
    state.load()
    state.commit(lotteries=(LOTO_REAL,))

    _resolve_with_failing_store(
        state, monkeypatch, (store._collection, "update_one"), PyMongoError("primary stepped down")
    )

    reloaded = AppState(store, clock=clock)
    reloaded.load()

    assert reloaded.winning_results == {}
    assert reloaded.winners == ()
    assert len(reloaded.sales) == 1
