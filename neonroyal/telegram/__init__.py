"""Telegram integration helpers."""

from .aiogram_router import build_router
from .keyboards import blackjack_keyboard, hilo_keyboard, holdem_keyboard, lobby_keyboard

__all__ = [
    "build_router",
    "blackjack_keyboard",
    "hilo_keyboard",
    "holdem_keyboard",
    "lobby_keyboard",
]
