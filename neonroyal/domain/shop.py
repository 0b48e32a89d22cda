"""Cosmetic shop: a typed catalog plus purchase and equip rules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .exceptions import AlreadyOwned, InsufficientFunds, NotOwned, UnknownItem
from .ledger import DEFAULT_THEME_ID, PlayerLedger


class ItemKind(str, Enum):
    THEME = "THEME"
    ACCESSORY = "ACCESSORY"


@dataclass(frozen=True, slots=True)
class ShopItem:
    item_id: str
    name: str
    price: int
    kind: ItemKind
    cosmetic_value: str
    icon: str


class ShopCatalog:
    """Registry of purchasable cosmetics keyed by id."""

    def __init__(self, items: Iterable[ShopItem] = ()) -> None:
        self._items: dict[str, ShopItem] = {}
        for item in items:
            self.register(item)

    def register(self, item: ShopItem) -> None:
        if item.item_id in self._items:
            raise ValueError(f"Shop item {item.item_id} already registered")
        self._items[item.item_id] = item

    def get(self, item_id: str) -> ShopItem:
        try:
            return self._items[item_id]
        except KeyError as exc:
            raise UnknownItem(f"Shop item {item_id} not found") from exc

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def iter_items(self, kind: ItemKind | None = None) -> Iterable[ShopItem]:
        return [item for item in self._items.values() if kind is None or item.kind is kind]


DEFAULT_ITEMS: tuple[ShopItem, ...] = (
    ShopItem(DEFAULT_THEME_ID, "Royal Gold", 0, ItemKind.THEME, "", "fa-crown"),
    ShopItem("theme_pink", "Cyber Pink", 2500, ItemKind.THEME, "theme-pink", "fa-ghost"),
    ShopItem("theme_emerald", "Deep Emerald", 5000, ItemKind.THEME, "theme-emerald", "fa-gem"),
    ShopItem("theme_solar", "Solar Flare", 10000, ItemKind.THEME, "theme-solar", "fa-sun"),
    ShopItem("acc_crown", "King's Crown", 1000, ItemKind.ACCESSORY, "👑", "fa-chess-king"),
    ShopItem("acc_dice", "Lucky Dice", 500, ItemKind.ACCESSORY, "🎲", "fa-dice"),
    ShopItem("acc_clover", "Four Leaf Clover", 750, ItemKind.ACCESSORY, "🍀", "fa-leaf"),
    ShopItem("acc_fire", "High Roller", 2000, ItemKind.ACCESSORY, "🔥", "fa-fire"),
)


def default_catalog() -> ShopCatalog:
    return ShopCatalog(DEFAULT_ITEMS)


def purchase_item(ledger: PlayerLedger, item: ShopItem) -> str:
    """Buy ``item`` and equip it in its slot. Returns the narration."""
    if item.item_id in ledger.owned_cosmetics:
        raise AlreadyOwned(f"{item.name} is already in your collection")
    if item.price > ledger.balance:
        raise InsufficientFunds(item.price, ledger.balance)
    ledger.debit(item.price)
    ledger.owned_cosmetics.add(item.item_id)
    _equip_slot(ledger, item)
    narration = f"You purchased the {item.name}!"
    ledger.last_event = narration
    return narration


def equip_item(ledger: PlayerLedger, item: ShopItem) -> str:
    if item.item_id not in ledger.owned_cosmetics:
        raise NotOwned(f"You do not own {item.name}")
    _equip_slot(ledger, item)
    narration = f"Equipped {item.name}."
    ledger.last_event = narration
    return narration


def _equip_slot(ledger: PlayerLedger, item: ShopItem) -> None:
    if item.kind is ItemKind.THEME:
        ledger.equipped_theme = item.item_id
    else:
        ledger.equipped_accessory = item.item_id
