"""Run the Neon Royal Telegram bot, or play a few rounds locally."""

from __future__ import annotations

import asyncio
import logging
import sys

from neonroyal import CasinoApp, NeonRoyalConfig
from neonroyal.domain.events import BonusClaimed, RoundSettled


async def log_round(event: RoundSettled) -> None:
    logging.getLogger("neonroyal.example").info(
        "%s %s %s -> balance %s",
        event.entry.game_type.display_name,
        event.entry.outcome.value,
        event.entry.amount,
        event.balance,
    )


async def log_bonus(event: BonusClaimed) -> None:
    logging.getLogger("neonroyal.example").info("%s bonus +%s", event.kind, event.amount)


def register(app: CasinoApp) -> None:
    """Subscribe the example listeners."""
    app.event_bus.subscribe(RoundSettled, log_round)
    app.event_bus.subscribe(BonusClaimed, log_bonus)


async def play_locally() -> None:
    app = CasinoApp(NeonRoyalConfig.from_env())
    register(app)
    await app.init_backend()
    casino = app.casino

    print(casino.time_context().active_bonus_label)
    print((await casino.play_slots()).narration)
    print((await casino.flip_coin("heads")).narration)

    report = await casino.deal_blackjack()
    while not report.resolved:
        score = report.details["player_score"]
        report = await (casino.hit() if score < 17 else casino.stand())
    print(report.narration)

    ledger = await casino.ledger()
    print(f"Balance: ${ledger.balance}")
    await app.close()


async def run_bot() -> None:
    from aiogram import Bot, Dispatcher
    from neonroyal.telegram import build_router

    app = CasinoApp(NeonRoyalConfig.from_env())
    register(app)
    await app.init_backend()

    bot = Bot(app.config.bot_token)
    dp = Dispatcher()
    dp.include_router(build_router(app))
    try:
        await dp.start_polling(bot)
    finally:
        await app.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    if "--local" in sys.argv:
        asyncio.run(play_locally())
    else:
        asyncio.run(run_bot())
