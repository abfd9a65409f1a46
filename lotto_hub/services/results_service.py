"""Results register: prize numbers per date, lottery and draw time."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timedelta

from lotto_hub.errors import NotFoundError, ValidationError
from lotto_hub.models.catalog import Lottery
from lotto_hub.models.result import DrawKey, Winner, WinningResults
from lotto_hub.services.sales_service import live_sales_for_draw
from lotto_hub.services.winner_service import drop_draw_winners, replace_draw_winners, resolve_winners
from lotto_hub.state import AppState
from lotto_hub.utils.clock import date_key, parse_date_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionOutcome:
    key: DrawKey
    prizes: list[str]
    winners: list[Winner]


class ResultsRegister:
    """Result use-cases. Every write re-resolves the affected draw.

    Winners are looked for among the sales of the draw that are younger than
    ``sales_hours``, the same window the retention purge keeps.
    """

    def __init__(self, sales_hours: int = 12) -> None:
        self.sales_window = timedelta(hours=sales_hours)

    @staticmethod
    def _lottery(state: AppState, lottery_id: str) -> Lottery:
        for lot in state.lotteries:
            if lot.id == lottery_id:
                return lot
        raise NotFoundError(message=f"Lottery {lottery_id} not found")

    @staticmethod
    def _normalize_prizes(lottery: Lottery, draw_time: str, prizes: Sequence[str]) -> list[str]:
        if draw_time not in lottery.draw_times:
            raise ValidationError(
                message="Invalid draw time",
                details={"drawTime": [f"{lottery.name} has no {draw_time} draw"]},
            )

        cleaned = [str(p or "").strip() for p in prizes]
        if not 1 <= len(cleaned) <= 3:
            raise ValidationError(message="Invalid prizes", details={"prizes": ["Between 1 and 3 prizes"]})
        if not any(cleaned):
            raise ValidationError(
                message="Invalid prizes",
                details={"prizes": ["At least one prize number is required"]},
            )

        digits = lottery.number_of_digits
        bad = [i + 1 for i, p in enumerate(cleaned) if p and (len(p) != digits or not p.isdigit())]
        if bad:
            raise ValidationError(
                message="Invalid prizes",
                details={"prizes": [f"Prize {i} must be exactly {digits} digits" for i in bad]},
            )
        return cleaned

    @staticmethod
    def _check_date(value: str) -> str:
        try:
            parse_date_key(value)
        except ValueError as exc:
            raise ValidationError(message="Invalid date", details={"date": ["Use YYYY-MM-DD"]}) from exc
        return value

    def _write(self, state: AppState, key: DrawKey, prizes: list[str], results: WinningResults) -> ResolutionOutcome:
        """Store ``prizes`` under ``key`` and resolve its winners in one commit."""

        now = state.clock()
        results.setdefault(key.draw_date, {}).setdefault(key.lottery_id, {})[key.draw_time] = prizes

        candidates = live_sales_for_draw(state.sales, key.lottery_id, key.draw_time, now, self.sales_window)
        fresh = resolve_winners(candidates, key, prizes, state.winners, resolved_at=now)
        state.commit(
            winning_results=results,
            winners=replace_draw_winners(state.winners, key, fresh),
        )

        logger.info(
            "Result %s %s %s = %s: %d winner(s)",
            key.draw_date,
            key.lottery_id,
            key.draw_time,
            prizes,
            len(fresh),
        )
        return ResolutionOutcome(key=key, prizes=prizes, winners=fresh)

    def add_result(self, state: AppState, lottery_id: str, draw_time: str, prizes: Sequence[str]) -> ResolutionOutcome:
        """Record today's result for a draw; a second call overwrites it."""

        with state.lock:
            lottery = self._lottery(state, lottery_id)
            cleaned = self._normalize_prizes(lottery, draw_time, prizes)
            key = DrawKey(date_key(state.clock()), lottery_id, draw_time)
            return self._write(state, key, cleaned, state.winning_results)

    def update_result(
        self,
        state: AppState,
        draw_date: str,
        lottery_id: str,
        draw_time: str,
        prizes: Sequence[str],
    ) -> ResolutionOutcome:
        """Edit an existing result and re-resolve that draw."""

        self._check_date(draw_date)
        with state.lock:
            results = state.winning_results
            if draw_time not in results.get(draw_date, {}).get(lottery_id, {}):
                raise NotFoundError(message=f"No result for {lottery_id} {draw_time} on {draw_date}")
            lottery = self._lottery(state, lottery_id)
            cleaned = self._normalize_prizes(lottery, draw_time, prizes)
            return self._write(state, DrawKey(draw_date, lottery_id, draw_time), cleaned, results)

    def delete_result(self, state: AppState, draw_date: str, lottery_id: str, draw_time: str) -> int:
        """Remove a result and its winners. Returns the number of winners removed."""

        self._check_date(draw_date)
        key = DrawKey(draw_date, lottery_id, draw_time)
        with state.lock:
            results = state.winning_results
            by_lottery = results.get(draw_date, {})
            times = by_lottery.get(lottery_id, {})
            if draw_time not in times:
                raise NotFoundError(message=f"No result for {lottery_id} {draw_time} on {draw_date}")

            del times[draw_time]
            if not times:
                del by_lottery[lottery_id]
            if not by_lottery:
                del results[draw_date]

            remaining = drop_draw_winners(state.winners, key)
            removed = len(state.winners) - len(remaining)
            state.commit(winning_results=results, winners=remaining)

        logger.info("Result %s %s %s deleted with %d winner(s)", draw_date, lottery_id, draw_time, removed)
        return removed

    def list_results(self, state: AppState, draw_date: str | None = None) -> WinningResults:
        results = state.winning_results
        if draw_date is None:
            return results
        self._check_date(draw_date)
        return {draw_date: results[draw_date]} if draw_date in results else {}

    def get_result(self, state: AppState, draw_date: str, lottery_id: str, draw_time: str) -> list[str]:
        prizes = state.winning_results.get(draw_date, {}).get(lottery_id, {}).get(draw_time)
        if prizes is None:
            raise NotFoundError(message=f"No result for {lottery_id} {draw_time} on {draw_date}")
        return prizes
