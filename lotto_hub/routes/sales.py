"""Sales routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from lotto_hub.db import get_state
from lotto_hub.errors import ValidationError
from lotto_hub.schemas.sale import SaleCreateSchema, SaleSchema
from lotto_hub.services.sales_service import SalesLedger
from lotto_hub.utils.responses import created, ok

sales_bp = Blueprint("sales", __name__)

_sale_schema = SaleSchema()
_sales_schema = SaleSchema(many=True)
_create_schema = SaleCreateSchema()
_ledger = SalesLedger()


@sales_bp.get("/sales")
def list_sales():
    """List sales, most recent first.

    Query params:
    - lotteryId + drawTime: only sales for that draw
    """

    lottery_id = (request.args.get("lotteryId") or "").strip()
    draw_time = (request.args.get("drawTime") or "").strip()
    state = get_state()

    if lottery_id or draw_time:
        if not (lottery_id and draw_time):
            raise ValidationError("lotteryId and drawTime must be given together")
        return ok(_sales_schema.dump(_ledger.query_by_draw(state, lottery_id, draw_time)))

    return ok(_sales_schema.dump(_ledger.list_sales(state)))


@sales_bp.post("/sales")
def create_sale():
    data = _create_schema.load(request.get_json(silent=True) or {})
    sale = _ledger.create_sale(
        get_state(),
        draws=data["draws"],
        tickets=data["tickets"],
        customer_name=data.get("customer_name"),
        customer_phone=data.get("customer_phone"),
        special_play_id=data.get("special_play_id"),
    )
    return created(_sale_schema.dump(sale))


@sales_bp.get("/sales/<sale_id>")
def get_sale(sale_id: str):
    return ok(_sale_schema.dump(_ledger.get_sale(get_state(), sale_id)))
