"""Ticket verification views of the sales ledger."""

from __future__ import annotations

import re
from typing import Any

from lotto_hub.errors import NotFoundError, ValidationError
from lotto_hub.models.sale import Sale
from lotto_hub.services.sales_service import SalesLedger
from lotto_hub.state import AppState

UNKNOWN_LOTTERY = "Lotería Desconocida"

_ID_RE = re.compile(r"^[A-Za-z0-9_\-@:. ]{1,96}$")


def _check_identifier(value: str | None, field: str) -> str:
    ident = (value or "").strip()
    if not ident:
        raise ValidationError(message=f"{field} is required", details={field: ["Missing data for required field."]})
    if not _ID_RE.match(ident):
        raise ValidationError(message=f"{field} is malformed", details={field: ["Invalid identifier"]})
    return ident


class VerificationService:
    def __init__(self, ledger: SalesLedger | None = None) -> None:
        self._ledger = ledger or SalesLedger()

    @staticmethod
    def _lottery_name(state: AppState, lottery_id: str) -> str:
        for lot in state.lotteries:
            if lot.id == lottery_id:
                return lot.name
        return UNKNOWN_LOTTERY

    def _draws(self, state: AppState, sale: Sale) -> list[dict[str, str]]:
        return [
            {
                "lotteryId": d.lottery_id,
                "lotteryName": self._lottery_name(state, d.lottery_id),
                "drawTime": d.draw_time,
            }
            for d in sale.draws
        ]

    def public_view(self, state: AppState, sale_id: str | None) -> dict[str, Any]:
        """Redacted projection safe to show to anyone holding the code."""

        ident = _check_identifier(sale_id, "saleId")
        try:
            sale = self._ledger.get_sale(state, ident)
        except NotFoundError as exc:
            raise NotFoundError(message="Ticket not found or invalid") from exc

        first = sale.draws[0]
        view: dict[str, Any] = {
            "id": sale.id,
            "customerName": sale.customer_name,
            "lotteryName": self._lottery_name(state, first.lottery_id),
            "drawTime": first.draw_time,
            "tickets": [{"ticketNumber": t.ticket_number} for t in sale.tickets],
            "createdAt": sale.sold_at.isoformat(),
        }
        if len(sale.draws) > 1:
            view["draws"] = self._draws(state, sale)
        return view

    def staff_view(self, state: AppState, identifier: str | None) -> dict[str, Any]:
        """Full sale detail, looked up by sale id or by one of its ticket ids."""

        ident = _check_identifier(identifier, "ticketId")
        sale = next((s for s in state.sales if s.id == ident), None) or self._ledger.find_by_ticket(state, ident)
        if sale is None:
            raise NotFoundError(message="Ticket not found or invalid")

        special_name = None
        if sale.special_play_id is not None:
            special_name = next((sp.name for sp in state.special_plays if sp.id == sale.special_play_id), None)

        return {
            "id": sale.id,
            "customerName": sale.customer_name,
            "customerPhone": sale.customer_phone,
            "draws": self._draws(state, sale),
            "tickets": [
                {"id": t.id, "ticketNumber": t.ticket_number, "fractions": t.fractions, "cost": t.cost}
                for t in sale.tickets
            ],
            "totalCost": sale.total_cost,
            "specialPlayId": sale.special_play_id,
            "specialPlayName": special_name,
            "createdAt": sale.sold_at.isoformat(),
        }
