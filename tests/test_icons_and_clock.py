from __future__ import annotations

from datetime import datetime, timezone

import pytest

from lotto_hub.icons import DEFAULT_ICON, IconName, normalize_icon, resolve_icon
from lotto_hub.utils.clock import date_key, draw_time_minutes, is_draw_time, make_clock, sort_draw_times, time_slots
from lotto_hub.utils.ids import new_id


def test_known_icons_resolve_case_insensitively():
    assert resolve_icon("TrendingUp").name is IconName.TRENDING_UP
    assert normalize_icon("gem") == "gem"


def test_unknown_icon_falls_back_to_default():
    assert resolve_icon("rocket").name is DEFAULT_ICON
    assert normalize_icon(None) == "ticket"


def test_custom_image_icon_is_kept():
    logo = "data:image/png;base64,iVBORw0KGgo="
    ref = resolve_icon(logo)

    assert ref.is_custom
    assert normalize_icon(logo) == logo


def test_time_slots_cover_the_day():
    slots = time_slots()

    assert len(slots) == 48
    assert slots[0] == "12:00 AM"
    assert slots[1] == "12:30 AM"
    assert slots[24] == "12:00 PM"
    assert slots[-1] == "11:30 PM"
    assert all(is_draw_time(s) for s in slots)


@pytest.mark.parametrize("value", ["2:00 PM", "13:00 PM", "02:00", "02:60 AM", "", "02:00 pm"])
def test_invalid_draw_times(value):
    assert not is_draw_time(value)


def test_draw_times_sort_chronologically():
    assert draw_time_minutes("12:15 AM") == 15
    assert draw_time_minutes("12:00 PM") == 720
    assert sort_draw_times(["08:00 PM", "09:30 AM", "12:00 PM", "08:00 PM"]) == ["09:30 AM", "12:00 PM", "08:00 PM"]


def test_clock_uses_local_date():
    now = make_clock("America/Santo_Domingo")()
    assert now.utcoffset() is not None

    late_utc = datetime(2026, 10, 19, 2, 0, tzinfo=timezone.utc)
    assert date_key(late_utc.astimezone(now.tzinfo)) == "2026-10-18"


def test_new_id_avoids_taken_ids():
    first = new_id("S")
    second = new_id("S", {first})

    assert first.startswith("S")
    assert second != first
