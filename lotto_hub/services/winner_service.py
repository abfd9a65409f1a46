"""Winner determination and payment tracking."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime

from lotto_hub.errors import ConflictError, NotFoundError
from lotto_hub.models.result import DrawKey, Winner
from lotto_hub.models.sale import Sale, Ticket
from lotto_hub.state import AppState

logger = logging.getLogger(__name__)

UNKNOWN_CUSTOMER = "N/A"


def match_tier(ticket_number: str, prizes: Sequence[str]) -> int | None:
    """1-based tier of the first prize equal to the ticket number.

    Empty prize slots are skipped; the first match wins, so a number repeated
    in several slots resolves to the best tier.
    """

    if not ticket_number or not ticket_number.isdigit():
        return None
    for index, prize in enumerate(prizes):
        if prize and prize == ticket_number:
            return index + 1
    return None


def winner_id_for(sale: Sale, ticket: Ticket, key: DrawKey) -> str:
    """Winner id is the ticket id; multi-draw tickets are scoped to the draw."""

    if len(sale.draws) <= 1:
        return ticket.id
    return f"{ticket.id}@{key.lottery_id}@{key.draw_time}"


def resolve_winners(
    sales: Iterable[Sale],
    key: DrawKey,
    prizes: Sequence[str],
    existing: Iterable[Winner],
    resolved_at: datetime,
) -> list[Winner]:
    """Compute the winners of one draw.

    ``sales`` are the live sales to consider; those without the draw are
    ignored. ``existing`` are the winners currently recorded for the same
    key: their paid state is carried over, and those whose sale is not among
    ``sales`` (purged or outside the window) are re-checked against their
    stored ticket number.
    """

    previous = {w.id: w for w in existing if w.key == key}
    found: dict[str, Winner] = {}
    seen_sales: set[str] = set()

    for sale in sales:
        seen_sales.add(sale.id)
        if not sale.has_draw(key.lottery_id, key.draw_time):
            continue
        for ticket in sale.tickets:
            if ticket.fractions <= 0:
                continue
            tier = match_tier(ticket.ticket_number, prizes)
            if tier is None:
                continue
            wid = winner_id_for(sale, ticket, key)
            if wid in found:
                continue
            before = previous.get(wid)
            found[wid] = Winner(
                id=wid,
                ticket_id=ticket.id,
                sale_id=sale.id,
                lottery_id=key.lottery_id,
                draw_time=key.draw_time,
                draw_date=key.draw_date,
                ticket_number=ticket.ticket_number,
                prize_tier=tier,
                fractions=ticket.fractions,
                resolved_at=before.resolved_at if before else resolved_at,
                paid=bool(before and before.paid),
                paid_at=before.paid_at if before else None,
                special_play_id=sale.special_play_id,
            )

    # Winners whose sale is out of scope: keep them while their number still wins.
    for wid, before in previous.items():
        if wid in found or before.sale_id in seen_sales:
            continue
        tier = match_tier(before.ticket_number, prizes)
        if tier is not None:
            found[wid] = replace(before, prize_tier=tier)

    return sorted(found.values(), key=lambda w: (w.prize_tier, w.ticket_number, w.id))


def replace_draw_winners(winners: Iterable[Winner], key: DrawKey, fresh: Iterable[Winner]) -> tuple[Winner, ...]:
    """Swap the winners of ``key`` for ``fresh``; other draws are untouched."""

    return (*(w for w in winners if w.key != key), *fresh)


def drop_draw_winners(winners: Iterable[Winner], key: DrawKey) -> tuple[Winner, ...]:
    return tuple(w for w in winners if w.key != key)


@dataclass(frozen=True)
class WinnerView:
    winner: Winner
    customer_name: str
    lottery_name: str


class WinnerService:
    """Winner listing and the irreversible paid transition."""

    def list_winners(
        self,
        state: AppState,
        draw_date: str | None = None,
        lottery_id: str | None = None,
        draw_time: str | None = None,
        paid: bool | None = None,
    ) -> list[WinnerView]:
        sales = {s.id: s for s in state.sales}
        names = {lot.id: lot.name for lot in state.lotteries}

        views: list[WinnerView] = []
        for w in state.winners:
            if draw_date is not None and w.draw_date != draw_date:
                continue
            if lottery_id is not None and w.lottery_id != lottery_id:
                continue
            if draw_time is not None and w.draw_time != draw_time:
                continue
            if paid is not None and w.paid != paid:
                continue
            sale = sales.get(w.sale_id)
            views.append(
                WinnerView(
                    winner=w,
                    customer_name=(sale.customer_name if sale and sale.customer_name else UNKNOWN_CUSTOMER),
                    lottery_name=names.get(w.lottery_id, UNKNOWN_CUSTOMER),
                )
            )

        views.sort(key=lambda v: (v.winner.draw_date, v.winner.lottery_id, v.winner.draw_time, v.winner.prize_tier))
        return views

    def get_winner(self, state: AppState, winner_id: str) -> Winner:
        for w in state.winners:
            if w.id == winner_id:
                return w
        raise NotFoundError(message=f"Winner {winner_id} not found")

    def set_paid(self, state: AppState, winner_id: str, paid: bool) -> Winner:
        """Only false -> true is allowed; repeating it is a no-op."""

        if not paid:
            current = self.get_winner(state, winner_id)
            if current.paid:
                raise ConflictError(message="A paid prize cannot be marked unpaid")
            return current
        return self.mark_paid(state, winner_id)

    def mark_paid(self, state: AppState, winner_id: str) -> Winner:
        with state.lock:
            current = self.get_winner(state, winner_id)
            if current.paid:
                return current

            updated = replace(current, paid=True, paid_at=state.clock())
            state.commit(winners=tuple(updated if w.id == winner_id else w for w in state.winners))

        logger.info("Winner %s paid (%s %s %s, tier %d)", winner_id, updated.lottery_id, updated.draw_time, updated.draw_date, updated.prize_tier)
        return updated
