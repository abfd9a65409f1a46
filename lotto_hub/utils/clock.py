"""Time helpers: application-local clock and draw-time parsing."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]

DRAW_TIME_RE = re.compile(r"^(0[1-9]|1[0-2]):([0-5][0-9]) (AM|PM)$")
DATE_FORMAT = "%Y-%m-%d"


def make_clock(tz_name: str) -> Clock:
    """Return a clock producing aware datetimes in the given timezone."""

    tz = ZoneInfo(tz_name)

    def _now() -> datetime:
        return datetime.now(timezone.utc).astimezone(tz)

    return _now


def date_key(moment: datetime) -> str:
    return moment.strftime(DATE_FORMAT)


def parse_date_key(value: str) -> date:
    """Parse a YYYY-MM-DD key; raises ValueError for anything else."""

    return datetime.strptime(value, DATE_FORMAT).date()


def is_draw_time(value: str) -> bool:
    return bool(DRAW_TIME_RE.match(value or ""))


def draw_time_minutes(value: str) -> int:
    """Minutes after midnight for a ``hh:mm AM|PM`` draw time."""

    m = DRAW_TIME_RE.match(value)
    if m is None:
        raise ValueError(f"Invalid draw time: {value!r}")
    hour = int(m.group(1)) % 12
    if m.group(3) == "PM":
        hour += 12
    return hour * 60 + int(m.group(2))


def sort_draw_times(values: Iterable[str]) -> list[str]:
    """Unique draw times in chronological order."""

    return sorted(set(values), key=draw_time_minutes)


def time_slots(step_minutes: int = 30) -> list[str]:
    """All draw-time slots of a day, e.g. ``12:00 AM`` .. ``11:30 PM``."""

    slots: list[str] = []
    for minutes in range(0, 24 * 60, step_minutes):
        h, m = divmod(minutes, 60)
        hour = 12 if h % 12 == 0 else h % 12
        period = "AM" if h < 12 else "PM"
        slots.append(f"{hour:02d}:{m:02d} {period}")
    return slots
