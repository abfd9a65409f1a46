"""Names, codecs and defaults of the persisted collections."""

from __future__ import annotations

from typing import Any

from lotto_hub.models.catalog import AppCustomization
from lotto_hub.models.result import WinningResults
from lotto_hub.repositories.state_store import RecordListLoader
from lotto_hub.schemas.catalog import AppCustomizationSchema, LotterySchema, SpecialPlaySchema
from lotto_hub.schemas.result import WinnerSchema, WinningResultsSchema
from lotto_hub.schemas.sale import SaleSchema

SALES = "sales"
WINNING_RESULTS = "winningResults"
WINNERS = "winners"
LOTTERIES = "lotteries"
SPECIAL_PLAYS = "specialPlays"
APP_CUSTOMIZATION = "appCustomization"

ALL = (SALES, WINNING_RESULTS, WINNERS, LOTTERIES, SPECIAL_PLAYS, APP_CUSTOMIZATION)

_sale_schema = SaleSchema()
_winner_schema = WinnerSchema()
_lottery_schema = LotterySchema()
_special_play_schema = SpecialPlaySchema()
_customization_schema = AppCustomizationSchema()
_results_schema = WinningResultsSchema()

load_sales = RecordListLoader(_sale_schema)
load_winners = RecordListLoader(_winner_schema)
load_lotteries = RecordListLoader(_lottery_schema)
load_special_plays = RecordListLoader(_special_play_schema)


def load_winning_results(raw: Any) -> tuple[WinningResults, list[str]]:
    data = _results_schema.load({"results": raw})
    return data["results"], []


def load_customization(raw: Any) -> tuple[AppCustomization, list[str]]:
    return _customization_schema.load(raw), []


def dump(name: str, value: Any) -> Any:
    """Serialize a collection value to its JSON-compatible payload."""

    if name == SALES:
        return _sale_schema.dump(value, many=True)
    if name == WINNERS:
        return _winner_schema.dump(value, many=True)
    if name == LOTTERIES:
        return _lottery_schema.dump(value, many=True)
    if name == SPECIAL_PLAYS:
        return _special_play_schema.dump(value, many=True)
    if name == APP_CUSTOMIZATION:
        return _customization_schema.dump(value)
    if name == WINNING_RESULTS:
        return {d: {lid: {t: list(p) for t, p in times.items()} for lid, times in lots.items()} for d, lots in value.items()}
    raise KeyError(name)
