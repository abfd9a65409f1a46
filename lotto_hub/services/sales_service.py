"""Sales ledger: append-only sales with derived per-draw views."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta
from typing import Any

from lotto_hub.errors import ConflictError, NotFoundError, ValidationError
from lotto_hub.models.catalog import Lottery, SpecialPlay
from lotto_hub.models.sale import DrawRef, Sale, Ticket
from lotto_hub.state import AppState
from lotto_hub.utils.ids import new_id

logger = logging.getLogger(__name__)


def money(value: float) -> float:
    return round(float(value), 2)


def expected_total(tickets: Iterable[Ticket], draw_count: int, special: bool) -> float:
    """Sum of ticket costs, times the number of draws for special plays."""

    subtotal = sum(t.cost for t in tickets)
    return money(subtotal * draw_count if special else subtotal)


def live_sales_for_draw(
    sales: Iterable[Sale],
    lottery_id: str,
    draw_time: str,
    now: datetime,
    max_age: timedelta,
) -> list[Sale]:
    """Sales of one draw that are still inside the retention window at ``now``."""

    cutoff = now - max_age
    return [s for s in sales if s.has_draw(lottery_id, draw_time) and s.sold_at >= cutoff]


class SalesLedger:
    """Sale use-cases."""

    @staticmethod
    def _lottery(state: AppState, lottery_id: str) -> Lottery | None:
        return next((lot for lot in state.lotteries if lot.id == lottery_id), None)

    @staticmethod
    def _special_play(state: AppState, special_play_id: str) -> SpecialPlay | None:
        return next((sp for sp in state.special_plays if sp.id == special_play_id), None)

    def _check_draws(self, state: AppState, draws: Sequence[DrawRef]) -> dict[str, Lottery]:
        """Return the referenced lotteries by id; raises ValidationError."""

        found: dict[str, Lottery] = {}
        errors: list[str] = []
        for d in draws:
            lottery = self._lottery(state, d.lottery_id)
            if lottery is None:
                errors.append(f"Unknown lottery {d.lottery_id}")
            elif d.draw_time not in lottery.draw_times:
                errors.append(f"{lottery.name} has no {d.draw_time} draw")
            else:
                found[lottery.id] = lottery
        if errors:
            raise ValidationError(message="Invalid draws", details={"draws": errors})
        return found

    def _pricing(
        self,
        state: AppState,
        draws: Sequence[DrawRef],
        special_play_id: str | None,
    ) -> tuple[int, float]:
        """Validate the draw selection; return (number of digits, unit cost)."""

        lotteries = self._check_draws(state, draws)

        if special_play_id is None:
            if len(draws) != 1:
                raise ValidationError(
                    message="Invalid draws",
                    details={"draws": ["A regular sale covers exactly one draw; use a special play for several"]},
                )
            lottery = lotteries[draws[0].lottery_id]
            return lottery.number_of_digits, lottery.cost

        play = self._special_play(state, special_play_id)
        if play is None:
            raise ValidationError(
                message="Invalid special play",
                details={"specialPlayId": [f"Unknown special play {special_play_id}"]},
            )
        not_allowed = [f"{d.lottery_id} {d.draw_time}" for d in draws if not play.allows(d.lottery_id, d.draw_time)]
        if not_allowed:
            raise ValidationError(
                message="Invalid draws",
                details={"draws": [f"{play.name} does not apply to {x}" for x in not_allowed]},
            )
        return play.number_of_digits, play.cost

    @staticmethod
    def _check_numbers(numbers: Iterable[str], digits: int) -> None:
        bad = [n for n in numbers if len(n) != digits or not n.isdigit()]
        if bad:
            raise ValidationError(
                message="Invalid ticket numbers",
                details={"tickets": [f"{n!r} must be exactly {digits} digits" for n in bad]},
            )

    @staticmethod
    def _check_fractions(values: Iterable[int]) -> None:
        if any(v < 1 for v in values):
            raise ValidationError(
                message="Invalid fractions",
                details={"tickets": ["Fractions must be at least 1"]},
            )

    @staticmethod
    def _taken_ticket_ids(state: AppState) -> set[str]:
        return {t.id for s in state.sales for t in s.tickets}

    def create_sale(
        self,
        state: AppState,
        draws: Sequence[DrawRef],
        tickets: Sequence[dict[str, Any]],
        customer_name: str | None = None,
        customer_phone: str | None = None,
        special_play_id: str | None = None,
    ) -> Sale:
        """Price and append a new sale.

        ``tickets`` are ``{"ticket_number", "fractions"}`` lines.
        """

        with state.lock:
            digits, unit_cost = self._pricing(state, draws, special_play_id)
            self._check_numbers((str(t["ticket_number"]) for t in tickets), digits)
            self._check_fractions(int(t.get("fractions", 1)) for t in tickets)

            taken_tickets = self._taken_ticket_ids(state)
            lines: list[Ticket] = []
            for line in tickets:
                fractions = int(line.get("fractions", 1))
                tid = new_id("T", taken_tickets)
                taken_tickets.add(tid)
                lines.append(
                    Ticket(
                        id=tid,
                        ticket_number=str(line["ticket_number"]),
                        fractions=fractions,
                        cost=money(fractions * unit_cost),
                    )
                )

            sale = Sale(
                id=new_id("S", {s.id for s in state.sales}),
                draws=tuple(draws),
                tickets=tuple(lines),
                total_cost=expected_total(lines, len(draws), special_play_id is not None),
                sold_at=state.clock(),
                customer_name=(customer_name or "").strip() or None,
                customer_phone=(customer_phone or "").strip() or None,
                special_play_id=special_play_id,
            )
            state.commit(sales=(*state.sales, sale))

        logger.info("Sale %s recorded: %d ticket(s), total %.2f", sale.id, len(sale.tickets), sale.total_cost)
        return sale

    def record_sale(self, state: AppState, data: dict[str, Any]) -> Sale:
        """Append a sale built elsewhere, after checking ids and totals."""

        draws: list[DrawRef] = list(data["draws"])
        special_play_id = data.get("special_play_id")
        sold_at: datetime = data["sold_at"]

        with state.lock:
            if any(s.id == data["id"] for s in state.sales):
                raise ConflictError(message=f"Sale {data['id']} already exists")

            self._check_draws(state, draws)
            if special_play_id is None and len(draws) != 1:
                raise ValidationError(
                    message="Invalid draws",
                    details={"draws": ["A regular sale covers exactly one draw"]},
                )

            self._check_fractions(int(line["fractions"]) for line in data["tickets"])

            taken_tickets = self._taken_ticket_ids(state)
            lines: list[Ticket] = []
            for line in data["tickets"]:
                tid = line.get("id") or new_id("T", taken_tickets)
                if tid in taken_tickets:
                    raise ConflictError(message=f"Ticket {tid} already exists")
                taken_tickets.add(tid)
                lines.append(
                    Ticket(
                        id=tid,
                        ticket_number=str(line["ticket_number"]),
                        fractions=int(line["fractions"]),
                        cost=money(line["cost"]),
                    )
                )

            total = money(data["total_cost"])
            expected = expected_total(lines, len(draws), special_play_id is not None)
            if abs(total - expected) > 0.005:
                raise ValidationError(
                    message="Total cost does not match tickets",
                    details={"totalCost": [f"Expected {expected:.2f}, got {total:.2f}"]},
                )

            sale = Sale(
                id=str(data["id"]),
                draws=tuple(draws),
                tickets=tuple(lines),
                total_cost=total,
                sold_at=sold_at,
                customer_name=data.get("customer_name"),
                customer_phone=data.get("customer_phone"),
                special_play_id=special_play_id,
            )
            state.commit(sales=(*state.sales, sale))

        logger.info("External sale %s recorded", sale.id)
        return sale

    def list_sales(self, state: AppState) -> list[Sale]:
        return sorted(state.sales, key=lambda s: s.sold_at, reverse=True)

    def query_by_draw(self, state: AppState, lottery_id: str, draw_time: str) -> list[Sale]:
        """Sales of one draw, most recent first."""

        return [s for s in self.list_sales(state) if s.has_draw(lottery_id, draw_time)]

    def get_sale(self, state: AppState, sale_id: str) -> Sale:
        for s in state.sales:
            if s.id == sale_id:
                return s
        raise NotFoundError(message=f"Sale {sale_id} not found")

    def find_by_ticket(self, state: AppState, ticket_id: str) -> Sale | None:
        for s in state.sales:
            if any(t.id == ticket_id for t in s.tickets):
                return s
        return None
