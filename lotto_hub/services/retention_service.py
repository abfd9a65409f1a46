"""Storage hygiene: drop old results, sales and winners."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from lotto_hub.state import AppState
from lotto_hub.utils.clock import parse_date_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurgeReport:
    result_dates: int = 0
    sales: int = 0
    winners: int = 0

    @property
    def total(self) -> int:
        return self.result_dates + self.sales + self.winners


class RetentionService:
    def __init__(self, results_days: int = 7, sales_hours: int = 12, winners_hours: int = 24) -> None:
        self.results_days = results_days
        self.sales_hours = sales_hours
        self.winners_hours = winners_hours

    def purge(self, state: AppState, now: datetime | None = None) -> PurgeReport:
        """Remove expired entries; nothing is written when nothing expired."""

        with state.lock:
            now = now or state.clock()
            oldest_date = (now - timedelta(days=self.results_days)).date()
            sales_cutoff = now - timedelta(hours=self.sales_hours)
            winners_cutoff = now - timedelta(hours=self.winners_hours)

            results = state.winning_results
            expired_dates = []
            for key in results:
                try:
                    if parse_date_key(key) < oldest_date:
                        expired_dates.append(key)
                except ValueError:
                    expired_dates.append(key)
            for key in expired_dates:
                del results[key]

            sales = tuple(s for s in state.sales if s.sold_at >= sales_cutoff)
            winners = tuple(
                w for w in state.winners if w.resolved_at >= winners_cutoff and w.draw_date not in expired_dates
            )

            report = PurgeReport(
                result_dates=len(expired_dates),
                sales=len(state.sales) - len(sales),
                winners=len(state.winners) - len(winners),
            )
            if report.total:
                state.commit(winning_results=results, sales=sales, winners=winners)

        if report.total:
            logger.info(
                "Purged %d result date(s), %d sale(s), %d winner(s)",
                report.result_dates,
                report.sales,
                report.winners,
            )
        return report
