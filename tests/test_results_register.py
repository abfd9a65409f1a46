from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest
from conftest import LOTO_REAL, NOW, TODAY

from lotto_hub.errors import ConflictError, NotFoundError, StorageError, ValidationError
from lotto_hub.models.catalog import Lottery
from lotto_hub.models.sale import DrawRef
from lotto_hub.repositories.json_store import JsonFileStore
from lotto_hub.services.results_service import ResultsRegister
from lotto_hub.services.sales_service import SalesLedger
from lotto_hub.services.winner_service import WinnerService
from lotto_hub.state import AppState

AFTERNOON = DrawRef("loto-real", "02:00 PM")
EVENING = DrawRef("loto-real", "08:00 PM")


@pytest.fixture
def register() -> ResultsRegister:
    return ResultsRegister()


def _sell(state: AppState, draw: DrawRef, *numbers: str) -> None:
    SalesLedger().create_sale(state, draws=[draw], tickets=[{"ticket_number": n} for n in numbers])


def test_add_result_resolves_winners(state, register):
    _sell(state, AFTERNOON, "123456")
    _sell(state, AFTERNOON, "654321")
    _sell(state, AFTERNOON, "000000")

    outcome = register.add_result(state, "loto-real", "02:00 PM", ["123456", "", "654321"])

    assert outcome.key.draw_date == TODAY
    assert [(w.ticket_number, w.prize_tier) for w in outcome.winners] == [("123456", 1), ("654321", 3)]
    assert state.winning_results == {TODAY: {"loto-real": {"02:00 PM": ["123456", "", "654321"]}}}
    assert len(state.winners) == 2


def test_re_registering_keeps_paid_winners(state, register):
    _sell(state, AFTERNOON, "123456")
    outcome = register.add_result(state, "loto-real", "02:00 PM", ["123456"])
    WinnerService().mark_paid(state, outcome.winners[0].id)

    again = register.add_result(state, "loto-real", "02:00 PM", ["123456"])

    assert len(state.winners) == 1
    assert again.winners[0].paid is True


def test_duplicate_prize_number_counts_as_best_tier(state, register):
    _sell(state, AFTERNOON, "123456")

    outcome = register.add_result(state, "loto-real", "02:00 PM", ["123456", "123456", ""])

    assert [w.prize_tier for w in outcome.winners] == [1]


@pytest.mark.parametrize(
    "lottery_id,draw_time,prizes,error",
    [
        ("missing", "02:00 PM", ["123456"], NotFoundError),
        ("loto-real", "09:00 PM", ["123456"], ValidationError),
        ("loto-real", "02:00 PM", ["", "", ""], ValidationError),
        ("loto-real", "02:00 PM", ["1234"], ValidationError),
        ("loto-real", "02:00 PM", ["1", "2", "3", "4"], ValidationError),
    ],
)
def test_add_result_rejects_bad_input(state, register, lottery_id, draw_time, prizes, error):
    with pytest.raises(error):
        register.add_result(state, lottery_id, draw_time, prizes)
    assert state.winning_results == {}


def test_update_drops_winners_that_no_longer_match(state, register):
    _sell(state, AFTERNOON, "123456")
    _sell(state, AFTERNOON, "654321")
    register.add_result(state, "loto-real", "02:00 PM", ["123456"])

    outcome = register.update_result(state, TODAY, "loto-real", "02:00 PM", ["654321"])

    assert [w.ticket_number for w in outcome.winners] == ["654321"]
    assert [w.ticket_number for w in state.winners] == ["654321"]


def test_update_missing_result(state, register):
    with pytest.raises(NotFoundError):
        register.update_result(state, TODAY, "loto-real", "02:00 PM", ["123456"])
    with pytest.raises(ValidationError):
        register.update_result(state, "18/10/2026", "loto-real", "02:00 PM", ["123456"])


def test_delete_removes_exactly_its_winners(state, register):
    _sell(state, AFTERNOON, "123456")
    _sell(state, EVENING, "123456")
    register.add_result(state, "loto-real", "02:00 PM", ["123456"])
    register.add_result(state, "loto-real", "08:00 PM", ["123456"])

    removed = register.delete_result(state, TODAY, "loto-real", "02:00 PM")

    assert removed == 1
    assert [w.draw_time for w in state.winners] == ["08:00 PM"]
    assert state.winning_results == {TODAY: {"loto-real": {"08:00 PM": ["123456"]}}}

    register.delete_result(state, TODAY, "loto-real", "08:00 PM")
    assert state.winning_results == {}
    with pytest.raises(NotFoundError):
        register.delete_result(state, TODAY, "loto-real", "08:00 PM")


def test_list_and_get_results(state, register):
    register.add_result(state, "pega-4-real", "08:00 PM", ["1234", "5678"])

    assert register.get_result(state, TODAY, "pega-4-real", "08:00 PM") == ["1234", "5678"]
    assert register.list_results(state, "2026-01-01") == {}
    assert register.list_results(state, TODAY) == {TODAY: {"pega-4-real": {"08:00 PM": ["1234", "5678"]}}}
    with pytest.raises(NotFoundError):
        register.get_result(state, TODAY, "pega-4-real", "02:00 PM")


def test_paid_is_irreversible(state, register):
    _sell(state, AFTERNOON, "123456")
    winner = register.add_result(state, "loto-real", "02:00 PM", ["123456"]).winners[0]
    service = WinnerService()

    paid = service.set_paid(state, winner.id, True)
    assert paid.paid and paid.paid_at is not None
    assert service.mark_paid(state, winner.id) == paid
    with pytest.raises(ConflictError):
        service.set_paid(state, winner.id, False)


def test_list_winners_views(state, register):
    _sell(state, AFTERNOON, "123456")
    register.add_result(state, "loto-real", "02:00 PM", ["123456"])

    views = WinnerService().list_winners(state, draw_date=TODAY, paid=False)

    assert len(views) == 1
    assert views[0].customer_name == "N/A"
    assert views[0].lottery_name == "Loto Real"
    assert WinnerService().list_winners(state, paid=True) == []


class _FlakyStore(JsonFileStore):
    fail = False

    def write_many(self, payloads: Mapping[str, Any]) -> None:
        if self.fail:
            raise StorageError(details="disk full")
        super().write_many(payloads)


def test_storage_failure_leaves_state_untouched(tmp_path, clock, register):
    store = _FlakyStore(tmp_path / "flaky")
    state = AppState(store, clock=clock)
    state.load()
    state.commit(lotteries=(LOTO_REAL,))
    _sell(state, AFTERNOON, "123456")

    store.fail = True
    with pytest.raises(StorageError):
        register.add_result(state, "loto-real", "02:00 PM", ["123456"])

    assert state.winning_results == {}
    assert state.winners == ()
    assert len(state.sales) == 1


NIGHT_OWL = Lottery(
    id="night-owl",
    name="Night Owl",
    icon="moon",
    number_of_digits=2,
    cost=10.0,
    draw_times=("12:00 AM", "11:00 PM"),
)


@pytest.mark.parametrize(
    ("sold_at", "draw_time", "result_at"),
    [
        ((23, 50), "12:00 AM", (0, 5)),
        ((22, 30), "11:00 PM", (0, 10)),
    ],
)
def test_sales_before_midnight_win_results_registered_after(state, register, clock, sold_at, draw_time, result_at):
    state.commit(lotteries=state.lotteries + (NIGHT_OWL,))
    clock.now = NOW.replace(hour=sold_at[0], minute=sold_at[1])
    _sell(state, DrawRef("night-owl", draw_time), "42")

    clock.now = NOW.replace(day=19, hour=result_at[0], minute=result_at[1])
    outcome = register.add_result(state, "night-owl", draw_time, ["42", "", ""])

    assert outcome.key.draw_date == "2026-10-19"
    assert [(w.ticket_number, w.prize_tier) for w in outcome.winners] == [("42", 1)]


def test_sales_older_than_the_window_are_not_matched(state, clock):
    _sell(state, AFTERNOON, "123456")
    clock.advance(hours=3)

    outcome = ResultsRegister(sales_hours=2).add_result(state, "loto-real", "02:00 PM", ["123456"])

    assert outcome.winners == []
