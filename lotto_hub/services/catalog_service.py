"""Catalog use-cases: lotteries, special plays and app customization."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from lotto_hub.errors import NotFoundError, ValidationError
from lotto_hub.icons import is_custom_image, normalize_icon
from lotto_hub.models.catalog import AppCustomization, Lottery, SpecialPlay, SpecialPlayTarget
from lotto_hub.repositories import collections as col
from lotto_hub.state import AppState
from lotto_hub.utils.clock import sort_draw_times
from lotto_hub.utils.ids import new_id

logger = logging.getLogger(__name__)

DEFAULT_LOTTERIES: tuple[Lottery, ...] = (
    Lottery(
        id="loto-real",
        name="Loto Real",
        icon="gem",
        number_of_digits=6,
        cost=25.0,
        draw_times=("02:00 PM", "08:00 PM"),
    ),
    Lottery(
        id="pega-4-real",
        name="Pega 4 Real",
        icon="diamond",
        number_of_digits=4,
        cost=20.0,
        draw_times=("02:00 PM", "08:00 PM"),
    ),
    Lottery(
        id="loto-leidsa",
        name="Loto Leidsa",
        icon="star",
        number_of_digits=6,
        cost=30.0,
        draw_times=("09:00 PM",),
    ),
)


class CatalogService:
    """Lottery and special play definitions."""

    # Lotteries

    def list_lotteries(self, state: AppState) -> list[Lottery]:
        return list(state.lotteries)

    def get_lottery(self, state: AppState, lottery_id: str) -> Lottery:
        for lot in state.lotteries:
            if lot.id == lottery_id:
                return lot
        raise NotFoundError(message=f"Lottery {lottery_id} not found")

    def create_lottery(self, state: AppState, data: dict[str, Any]) -> Lottery:
        with state.lock:
            lottery = Lottery(
                id=new_id("L", {lot.id for lot in state.lotteries}),
                name=str(data["name"]).strip(),
                icon=normalize_icon(data.get("icon")),
                number_of_digits=int(data["number_of_digits"]),
                cost=float(data["cost"]),
                draw_times=tuple(sort_draw_times(data["draw_times"])),
            )
            state.commit(lotteries=(*state.lotteries, lottery))
        logger.info("Lottery %s created (%s)", lottery.id, lottery.name)
        return lottery

    def update_lottery(self, state: AppState, lottery_id: str, data: dict[str, Any]) -> Lottery:
        with state.lock:
            current = self.get_lottery(state, lottery_id)
            updated = replace(
                current,
                name=str(data["name"]).strip(),
                icon=normalize_icon(data.get("icon") or current.icon),
                number_of_digits=int(data["number_of_digits"]),
                cost=float(data["cost"]),
                draw_times=tuple(sort_draw_times(data["draw_times"])),
            )
            lotteries = tuple(updated if lot.id == lottery_id else lot for lot in state.lotteries)

            # Special plays may only reference draw times that still exist.
            plays = tuple(self._prune_targets(sp, lottery_id, set(updated.draw_times)) for sp in state.special_plays)
            state.commit(lotteries=lotteries, special_plays=plays)
        return updated

    def delete_lottery(self, state: AppState, lottery_id: str) -> None:
        with state.lock:
            self.get_lottery(state, lottery_id)
            lotteries = tuple(lot for lot in state.lotteries if lot.id != lottery_id)
            plays = tuple(self._prune_targets(sp, lottery_id, set()) for sp in state.special_plays)
            state.commit(lotteries=lotteries, special_plays=plays)
        logger.info("Lottery %s deleted", lottery_id)

    @staticmethod
    def _prune_targets(play: SpecialPlay, lottery_id: str, keep_times: set[str]) -> SpecialPlay:
        targets: list[SpecialPlayTarget] = []
        for t in play.applies_to:
            if t.lottery_id != lottery_id:
                targets.append(t)
                continue
            times = tuple(x for x in t.draw_times if x in keep_times)
            if times:
                targets.append(SpecialPlayTarget(lottery_id=t.lottery_id, draw_times=times))
        if tuple(targets) == play.applies_to:
            return play
        return replace(play, applies_to=tuple(targets))

    # Special plays

    def list_special_plays(self, state: AppState) -> list[SpecialPlay]:
        return list(state.special_plays)

    def get_special_play(self, state: AppState, special_play_id: str) -> SpecialPlay:
        for sp in state.special_plays:
            if sp.id == special_play_id:
                return sp
        raise NotFoundError(message=f"Special play {special_play_id} not found")

    def _check_targets(self, state: AppState, targets: list[SpecialPlayTarget]) -> tuple[SpecialPlayTarget, ...]:
        errors: list[str] = []
        checked: list[SpecialPlayTarget] = []
        lotteries = {lot.id: lot for lot in state.lotteries}
        for t in targets:
            lottery = lotteries.get(t.lottery_id)
            if lottery is None:
                errors.append(f"Unknown lottery {t.lottery_id}")
                continue
            missing = [x for x in t.draw_times if x not in lottery.draw_times]
            if missing:
                errors.append(f"{lottery.name} has no draw at {', '.join(missing)}")
                continue
            checked.append(SpecialPlayTarget(lottery_id=t.lottery_id, draw_times=tuple(sort_draw_times(t.draw_times))))
        if errors:
            raise ValidationError(message="Invalid special play targets", details={"appliesTo": errors})
        return tuple(checked)

    def create_special_play(self, state: AppState, data: dict[str, Any]) -> SpecialPlay:
        with state.lock:
            play = SpecialPlay(
                id=new_id("SP", {sp.id for sp in state.special_plays}),
                name=str(data["name"]).strip(),
                icon=normalize_icon(data.get("icon")),
                number_of_digits=int(data["number_of_digits"]),
                cost=float(data["cost"]),
                applies_to=self._check_targets(state, list(data["applies_to"])),
            )
            state.commit(special_plays=(*state.special_plays, play))
        logger.info("Special play %s created (%s)", play.id, play.name)
        return play

    def update_special_play(self, state: AppState, special_play_id: str, data: dict[str, Any]) -> SpecialPlay:
        with state.lock:
            current = self.get_special_play(state, special_play_id)
            updated = replace(
                current,
                name=str(data["name"]).strip(),
                icon=normalize_icon(data.get("icon") or current.icon),
                number_of_digits=int(data["number_of_digits"]),
                cost=float(data["cost"]),
                applies_to=self._check_targets(state, list(data["applies_to"])),
            )
            state.commit(special_plays=tuple(updated if sp.id == special_play_id else sp for sp in state.special_plays))
        return updated

    def delete_special_play(self, state: AppState, special_play_id: str) -> None:
        with state.lock:
            self.get_special_play(state, special_play_id)
            state.commit(special_plays=tuple(sp for sp in state.special_plays if sp.id != special_play_id))
        logger.info("Special play %s deleted", special_play_id)

    # Customization

    def get_customization(self, state: AppState) -> AppCustomization:
        return state.customization

    def update_customization(self, state: AppState, changes: dict[str, Any]) -> AppCustomization:
        with state.lock:
            updated = replace(state.customization, **changes)
            if updated.app_logo is not None and not is_custom_image(updated.app_logo):
                raise ValidationError(
                    message="Invalid logo",
                    details={"appLogo": ["Logo must be an image data URL"]},
                )
            state.commit(customization=updated)
        return updated

    def seed_defaults(self, state: AppState) -> bool:
        """Install the default lotteries when none were ever stored."""

        with state.lock:
            if not state.was_missing(col.LOTTERIES):
                return False
            state.commit(lotteries=DEFAULT_LOTTERIES)
        logger.info("Seeded %d default lotteries", len(DEFAULT_LOTTERIES))
        return True
