"""Draw results and derived winners."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# date -> lotteryId -> drawTime -> prizes (index 0 is first prize)
WinningResults = dict[str, dict[str, dict[str, list[str]]]]


@dataclass(frozen=True)
class DrawKey:
    draw_date: str
    lottery_id: str
    draw_time: str


@dataclass(frozen=True)
class Winner:
    id: str
    ticket_id: str
    sale_id: str
    lottery_id: str
    draw_time: str
    draw_date: str
    ticket_number: str
    prize_tier: int
    fractions: int
    resolved_at: datetime
    paid: bool = False
    paid_at: datetime | None = None
    special_play_id: str | None = None

    @property
    def key(self) -> DrawKey:
        return DrawKey(self.draw_date, self.lottery_id, self.draw_time)
