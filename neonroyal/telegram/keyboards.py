"""Keyboard helpers for the Neon Royal bot."""

from __future__ import annotations

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

CALLBACK_PREFIX = "neonroyal"


def _button(text: str, action: str) -> InlineKeyboardButton:
    return InlineKeyboardButton(text=text, callback_data=f"{CALLBACK_PREFIX}:{action}")


def lobby_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [_button("🎰 Slots", "slots"), _button("🟢 Plinko", "plinko")],
            [_button("🪙 Heads", "flip:HEADS"), _button("🪙 Tails", "flip:TAILS")],
            [_button("🃏 Blackjack", "blackjack"), _button("🂡 Hi-Lo", "hilo")],
            [_button("♠️ Hold'em", "holdem"), _button("🎁 Daily", "daily")],
        ]
    )


def blackjack_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[[_button("➕ Hit", "bj:hit"), _button("✋ Stand", "bj:stand")]]
    )


def hilo_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[[_button("⬆️ HI", "hilo:HI"), _button("⬇️ LO", "hilo:LO")]]
    )


def holdem_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[[_button("▶️ Next", "holdem:next")]])


def play_again_keyboard(action: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[[_button("🔄 Play again", action), _button("🏠 Lobby", "lobby")]]
    )
