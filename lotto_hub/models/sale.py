"""Sales ledger records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DrawRef:
    """A specific lottery draw time a sale participates in."""

    lottery_id: str
    draw_time: str


@dataclass(frozen=True)
class Ticket:
    id: str
    ticket_number: str
    fractions: int
    cost: float


@dataclass(frozen=True)
class Sale:
    id: str
    draws: tuple[DrawRef, ...]
    tickets: tuple[Ticket, ...]
    total_cost: float
    sold_at: datetime
    customer_name: str | None = None
    customer_phone: str | None = None
    special_play_id: str | None = None

    def has_draw(self, lottery_id: str, draw_time: str) -> bool:
        return any(d.lottery_id == lottery_id and d.draw_time == draw_time for d in self.draws)

    @property
    def is_special(self) -> bool:
        return self.special_play_id is not None
