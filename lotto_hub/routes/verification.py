"""Ticket verification routes."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from lotto_hub.db import get_state
from lotto_hub.schemas.sale import SaleRecordSchema
from lotto_hub.services.auth_service import TokenService
from lotto_hub.services.sales_service import SalesLedger
from lotto_hub.services.verification_service import VerificationService
from lotto_hub.utils.responses import created, ok

verification_bp = Blueprint("verification", __name__)

_record_schema = SaleRecordSchema()
_ledger = SalesLedger()
_service = VerificationService(_ledger)


def _tokens() -> TokenService:
    return TokenService(
        str(current_app.config["SECRET_KEY"]),
        int(current_app.config["TOKEN_MAX_AGE_SECONDS"]),
    )


@verification_bp.get("/verify")
def verify_sale():
    """Public lookup by sale id (?saleId=, ?id= or ?code=)."""

    sale_id = request.args.get("saleId") or request.args.get("id") or request.args.get("code")
    return ok(_service.public_view(get_state(), sale_id))


@verification_bp.get("/verify/detail")
def verify_sale_detail():
    """Staff lookup by sale or ticket id; requires an admin/seller bearer token."""

    _tokens().authorize(request.headers.get("Authorization"))
    return ok(_service.staff_view(get_state(), request.args.get("ticketId")))


@verification_bp.post("/verify/sales")
def record_sale():
    data = _record_schema.load(request.get_json(silent=True) or {})
    sale = _ledger.record_sale(get_state(), data)
    return created({"message": "Sale recorded successfully.", "saleId": sale.id})
