"""Domain records and ORM models."""

from lotto_hub.models.catalog import AppCustomization, Lottery, SpecialPlay, SpecialPlayTarget
from lotto_hub.models.result import DrawKey, Winner, WinningResults
from lotto_hub.models.sale import DrawRef, Sale, Ticket
from lotto_hub.models.stored_collection import StoredCollection

__all__ = [
    "AppCustomization",
    "DrawKey",
    "DrawRef",
    "Lottery",
    "Sale",
    "SpecialPlay",
    "SpecialPlayTarget",
    "StoredCollection",
    "Ticket",
    "Winner",
    "WinningResults",
]
