"""Icon references for lotteries and special plays.

An icon is either one of the built-in names or a custom image carried as a
``data:image/...`` URL. Anything else resolves to the default icon.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class IconName(str, Enum):
    TICKET = "ticket"
    STAR = "star"
    TRENDING_UP = "trendingUp"
    SUN = "sun"
    MOON = "moon"
    AWARD = "award"
    GEM = "gem"
    DIAMOND = "diamond"


DEFAULT_ICON = IconName.TICKET

_BY_KEY = {icon.value.lower(): icon for icon in IconName}


@dataclass(frozen=True)
class IconRef:
    """Resolved icon: exactly one of ``name`` or ``image_data`` is set."""

    name: IconName | None = None
    image_data: str | None = None

    @property
    def is_custom(self) -> bool:
        return self.image_data is not None

    def to_value(self) -> str:
        if self.image_data is not None:
            return self.image_data
        return (self.name or DEFAULT_ICON).value


def is_custom_image(value: str) -> bool:
    return value.startswith("data:image/")


def resolve_icon(value: str | None) -> IconRef:
    """Map a stored icon value to an IconRef, falling back to the default."""

    raw = (value or "").strip()
    if raw and is_custom_image(raw):
        return IconRef(image_data=raw)
    return IconRef(name=_BY_KEY.get(raw.lower(), DEFAULT_ICON))


def normalize_icon(value: str | None) -> str:
    return resolve_icon(value).to_value()
