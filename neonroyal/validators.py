"""Validation utilities for Neon Royal applications."""

from __future__ import annotations

from .app import CasinoApp
from .domain.ledger import DEFAULT_THEME_ID
from .domain.shop import ItemKind


def validate_app(app: CasinoApp) -> list[str]:
    """Return list of validation errors discovered in configured app."""
    errors: list[str] = []

    ledger = app.config.ledger
    if ledger.initial_balance < 0:
        errors.append(f"Ledger 'initial_balance' cannot be negative, got {ledger.initial_balance}.")
    if ledger.default_bet <= 0:
        errors.append(f"Ledger 'default_bet' must be positive, got {ledger.default_bet}.")
    elif ledger.default_bet > ledger.initial_balance:
        errors.append("Ledger 'default_bet' exceeds 'initial_balance'.")
    if ledger.history_limit <= 0:
        errors.append(f"Ledger 'history_limit' must be positive, got {ledger.history_limit}.")
    for option in ledger.bet_options:
        if option <= 0:
            errors.append(f"Bet option '{option}' must be positive.")

    rewards = app.config.rewards
    if rewards.daily_base <= 0:
        errors.append("Rewards 'daily_base' must be positive.")
    if rewards.daily_big_multiplier < 1:
        errors.append("Rewards 'daily_big_multiplier' must be at least 1.")
    if rewards.weekly_amount <= 0:
        errors.append("Rewards 'weekly_amount' must be positive.")
    if rewards.daily_cooldown.total_seconds() <= 0 or rewards.weekly_cooldown.total_seconds() <= 0:
        errors.append("Reward cooldowns must be positive.")

    bonus = app.config.bonus
    if not 0 <= bonus.golden_hour <= 23:
        errors.append(f"Bonus 'golden_hour' must be between 0 and 23, got {bonus.golden_hour}.")
    start, end = bonus.graveyard_hours
    if not (0 <= start <= end <= 24):
        errors.append(f"Bonus 'graveyard_hours' {bonus.graveyard_hours} is not a valid range.")
    if bonus.golden_multiplier < 1 or bonus.global_multiplier < 1:
        errors.append("Bonus multipliers must be at least 1.")
    if bonus.timezone:
        try:
            bonus.tzinfo()
        except (KeyError, ValueError) as exc:
            errors.append(f"Bonus timezone '{bonus.timezone}' is unknown: {exc}.")

    if DEFAULT_THEME_ID not in app.catalog:
        errors.append(f"Shop catalog must contain the default theme '{DEFAULT_THEME_ID}'.")
    for item in app.catalog.iter_items():
        if item.price < 0:
            errors.append(f"Shop item '{item.item_id}' has negative price '{item.price}'.")
        if not item.name:
            errors.append(f"Shop item '{item.item_id}' has no name.")
        if item.kind is ItemKind.ACCESSORY and not item.cosmetic_value:
            errors.append(f"Accessory '{item.item_id}' has no badge.")

    return errors


__all__ = ["validate_app"]
