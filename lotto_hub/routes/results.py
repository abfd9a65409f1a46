"""Results and winners routes (controllers). No business logic here."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, current_app, request
from marshmallow import Schema, fields

from lotto_hub.db import get_state
from lotto_hub.models.result import Winner
from lotto_hub.schemas.result import PrizesSchema, ResultCreateSchema, WinnerSchema, WinnersQuerySchema
from lotto_hub.services.results_service import ResolutionOutcome, ResultsRegister
from lotto_hub.services.winner_service import WinnerService, WinnerView
from lotto_hub.utils.responses import created, ok

results_bp = Blueprint("results", __name__)

_create_schema = ResultCreateSchema()
_prizes_schema = PrizesSchema()
_winner_schema = WinnerSchema()
_winners_query = WinnersQuerySchema()
_winners = WinnerService()


class _PaidSchema(Schema):
    paid = fields.Boolean(required=True)


_paid_schema = _PaidSchema()


def _register() -> ResultsRegister:
    return ResultsRegister(sales_hours=int(current_app.config["SALES_RETENTION_HOURS"]))


def _dump_view(view: WinnerView) -> dict[str, Any]:
    data = _winner_schema.dump(view.winner)
    data["customerName"] = view.customer_name
    data["lotteryName"] = view.lottery_name
    return data


def _dump_outcome(outcome: ResolutionOutcome) -> dict[str, Any]:
    return {
        "date": outcome.key.draw_date,
        "lotteryId": outcome.key.lottery_id,
        "drawTime": outcome.key.draw_time,
        "prizes": outcome.prizes,
        "winners": _winner_schema.dump(outcome.winners, many=True),
    }


def _dump_winner(winner: Winner) -> dict[str, Any]:
    return _winner_schema.dump(winner)


@results_bp.get("/results")
def list_results():
    """Registered results, optionally for one date (?date=YYYY-MM-DD)."""

    draw_date = (request.args.get("date") or "").strip() or None
    return ok(_register().list_results(get_state(), draw_date))


@results_bp.post("/results")
def add_result():
    data = _create_schema.load(request.get_json(silent=True) or {})
    outcome = _register().add_result(get_state(), data["lottery_id"], data["draw_time"], data["prizes"])
    return created(_dump_outcome(outcome))


@results_bp.get("/results/<draw_date>/<lottery_id>/<draw_time>")
def get_result(draw_date: str, lottery_id: str, draw_time: str):
    prizes = _register().get_result(get_state(), draw_date, lottery_id, draw_time)
    return ok({"date": draw_date, "lotteryId": lottery_id, "drawTime": draw_time, "prizes": prizes})


@results_bp.put("/results/<draw_date>/<lottery_id>/<draw_time>")
def update_result(draw_date: str, lottery_id: str, draw_time: str):
    data = _prizes_schema.load(request.get_json(silent=True) or {})
    outcome = _register().update_result(get_state(), draw_date, lottery_id, draw_time, data["prizes"])
    return ok(_dump_outcome(outcome))


@results_bp.delete("/results/<draw_date>/<lottery_id>/<draw_time>")
def delete_result(draw_date: str, lottery_id: str, draw_time: str):
    removed = _register().delete_result(get_state(), draw_date, lottery_id, draw_time)
    return ok({"deleted": True, "winnersRemoved": removed})


@results_bp.get("/winners")
def list_winners():
    """Winners filtered by ?date, ?lotteryId, ?drawTime and ?paid."""

    query = _winners_query.load(request.args.to_dict())
    views = _winners.list_winners(
        get_state(),
        draw_date=query.get("date"),
        lottery_id=query.get("lottery_id"),
        draw_time=query.get("draw_time"),
        paid=query.get("paid"),
    )
    return ok([_dump_view(v) for v in views])


@results_bp.post("/winners/<winner_id>/pay")
def pay_winner(winner_id: str):
    return ok(_dump_winner(_winners.mark_paid(get_state(), winner_id)))


@results_bp.patch("/winners/<winner_id>")
def update_winner(winner_id: str):
    data = _paid_schema.load(request.get_json(silent=True) or {})
    return ok(_dump_winner(_winners.set_paid(get_state(), winner_id, data["paid"])))
