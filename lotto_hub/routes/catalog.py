"""Catalog routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from lotto_hub.db import get_state
from lotto_hub.icons import IconName
from lotto_hub.schemas.catalog import (
    AppCustomizationPayloadSchema,
    AppCustomizationSchema,
    LotteryPayloadSchema,
    LotterySchema,
    SpecialPlayPayloadSchema,
    SpecialPlaySchema,
)
from lotto_hub.services.catalog_service import CatalogService
from lotto_hub.utils.clock import time_slots
from lotto_hub.utils.responses import created, ok

catalog_bp = Blueprint("catalog", __name__)

_lottery_schema = LotterySchema()
_lotteries_schema = LotterySchema(many=True)
_lottery_payload = LotteryPayloadSchema()
_play_schema = SpecialPlaySchema()
_plays_schema = SpecialPlaySchema(many=True)
_play_payload = SpecialPlayPayloadSchema()
_customization_schema = AppCustomizationSchema()
_customization_payload = AppCustomizationPayloadSchema()
_service = CatalogService()


@catalog_bp.get("/lotteries")
def list_lotteries():
    return ok(_lotteries_schema.dump(_service.list_lotteries(get_state())))


@catalog_bp.post("/lotteries")
def create_lottery():
    data = _lottery_payload.load(request.get_json(silent=True) or {})
    lottery = _service.create_lottery(get_state(), data)
    return created(_lottery_schema.dump(lottery))


@catalog_bp.get("/lotteries/<lottery_id>")
def get_lottery(lottery_id: str):
    return ok(_lottery_schema.dump(_service.get_lottery(get_state(), lottery_id)))


@catalog_bp.put("/lotteries/<lottery_id>")
def update_lottery(lottery_id: str):
    data = _lottery_payload.load(request.get_json(silent=True) or {})
    lottery = _service.update_lottery(get_state(), lottery_id, data)
    return ok(_lottery_schema.dump(lottery))


@catalog_bp.delete("/lotteries/<lottery_id>")
def delete_lottery(lottery_id: str):
    _service.delete_lottery(get_state(), lottery_id)
    return ok({"id": lottery_id, "deleted": True})


@catalog_bp.get("/special-plays")
def list_special_plays():
    return ok(_plays_schema.dump(_service.list_special_plays(get_state())))


@catalog_bp.post("/special-plays")
def create_special_play():
    data = _play_payload.load(request.get_json(silent=True) or {})
    play = _service.create_special_play(get_state(), data)
    return created(_play_schema.dump(play))


@catalog_bp.get("/special-plays/<special_play_id>")
def get_special_play(special_play_id: str):
    return ok(_play_schema.dump(_service.get_special_play(get_state(), special_play_id)))


@catalog_bp.put("/special-plays/<special_play_id>")
def update_special_play(special_play_id: str):
    data = _play_payload.load(request.get_json(silent=True) or {})
    play = _service.update_special_play(get_state(), special_play_id, data)
    return ok(_play_schema.dump(play))


@catalog_bp.delete("/special-plays/<special_play_id>")
def delete_special_play(special_play_id: str):
    _service.delete_special_play(get_state(), special_play_id)
    return ok({"id": special_play_id, "deleted": True})


@catalog_bp.get("/time-slots")
def list_time_slots():
    """Selectable draw times, every 30 minutes."""

    return ok(time_slots())


@catalog_bp.get("/icons")
def list_icons():
    return ok([icon.value for icon in IconName])


@catalog_bp.get("/customization")
def get_customization():
    return ok(_customization_schema.dump(_service.get_customization(get_state())))


@catalog_bp.put("/customization")
def update_customization():
    changes = _customization_payload.load(request.get_json(silent=True) or {})
    updated = _service.update_customization(get_state(), changes)
    return ok(_customization_schema.dump(updated))
