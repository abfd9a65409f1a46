"""Catalog records: lotteries, special plays and app customization."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Lottery:
    id: str
    name: str
    icon: str
    number_of_digits: int
    cost: float
    draw_times: tuple[str, ...]


@dataclass(frozen=True)
class SpecialPlayTarget:
    """Draws of one lottery a special play can be sold for."""

    lottery_id: str
    draw_times: tuple[str, ...]


@dataclass(frozen=True)
class SpecialPlay:
    id: str
    name: str
    icon: str
    number_of_digits: int
    cost: float
    applies_to: tuple[SpecialPlayTarget, ...] = ()

    def allows(self, lottery_id: str, draw_time: str) -> bool:
        return any(t.lottery_id == lottery_id and draw_time in t.draw_times for t in self.applies_to)


@dataclass(frozen=True)
class AppCustomization:
    app_name: str = "Lotto Hub"
    app_logo: str | None = None
