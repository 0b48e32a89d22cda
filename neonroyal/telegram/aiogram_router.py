"""Factory helpers to wire the casino service into aiogram."""

from __future__ import annotations

from typing import Awaitable, Callable, Iterable, Sequence

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, InlineKeyboardMarkup, Message, User

from ..app import CasinoApp
from ..domain.bonuses import TimeContext
from ..domain.exceptions import InvalidWager, NeonRoyalError, TooSoon
from ..domain.games import RoundReport
from ..domain.ledger import GameType, HistoryEntry, PlayerLedger
from ..domain.shop import ItemKind, ShopCatalog
from .delivery import acknowledge, reply_to
from .keyboards import (
    CALLBACK_PREFIX,
    blackjack_keyboard,
    hilo_keyboard,
    holdem_keyboard,
    lobby_keyboard,
    play_again_keyboard,
)

RoundAction = Callable[[str], Awaitable[RoundReport]]

_IN_PROGRESS_KEYBOARDS: dict[GameType, Callable[[], InlineKeyboardMarkup]] = {
    GameType.BLACKJACK: blackjack_keyboard,
    GameType.HI_LO: hilo_keyboard,
    GameType.TEXAS_HOLDEM: holdem_keyboard,
}

_REPLAY_ACTIONS = {
    GameType.SLOTS: "slots",
    GameType.PLINKO: "plinko",
    GameType.BLACKJACK: "blackjack",
    GameType.HI_LO: "hilo",
    GameType.TEXAS_HOLDEM: "holdem",
}


def build_router(app: CasinoApp) -> Router:
    router = Router()
    casino = app.casino

    async def play(message: Message | None, profile_id: str, action: RoundAction) -> None:
        try:
            report = await action(profile_id)
        except NeonRoyalError as exc:
            await reply_to(message, format_error(exc))
            return
        ledger = await casino.ledger(profile_id)
        await reply_to(
            message,
            format_report(report, ledger.balance),
            reply_markup=report_keyboard(report),
        )

    async def respond(message: Message, action: Callable[[], Awaitable[str]]) -> None:
        try:
            text = await action()
        except NeonRoyalError as exc:
            text = format_error(exc)
        await reply_to(message, text)

    @router.message(Command("start", "help"))
    async def handle_start(message: Message) -> None:
        await reply_to(message, render_help_message(), reply_markup=lobby_keyboard())

    @router.message(Command("balance"))
    async def handle_balance(message: Message) -> None:
        if not message.from_user:
            return
        ledger = await casino.ledger(profile_for(message.from_user))
        await reply_to(message, format_balance(ledger, app.catalog))

    @router.message(Command("bet"))
    async def handle_bet(message: Message) -> None:
        if not message.from_user:
            return
        profile_id = profile_for(message.from_user)

        async def action() -> str:
            args = command_args(message.text)
            if not args:
                ledger = await casino.ledger(profile_id)
                options = ", ".join(str(opt) for opt in app.config.ledger.bet_options)
                return f"Current bet: ${ledger.current_bet}. Try /bet <amount> ({options})."
            ledger = await casino.set_bet(parse_amount(args[0]), profile_id=profile_id)
            return f"Bet set to ${ledger.current_bet}."

        await respond(message, action)

    @router.message(Command("slots"))
    async def handle_slots(message: Message) -> None:
        if not message.from_user:
            return
        args = command_args(message.text)
        await play(
            message,
            profile_for(message.from_user),
            lambda pid: casino.play_slots(wager_arg(args, 0), profile_id=pid),
        )

    @router.message(Command("flip"))
    async def handle_flip(message: Message) -> None:
        if not message.from_user:
            return
        args = command_args(message.text)
        if not args:
            await reply_to(message, "Call it: /flip heads|tails [wager]")
            return
        await play(
            message,
            profile_for(message.from_user),
            lambda pid: casino.flip_coin(args[0], wager_arg(args, 1), profile_id=pid),
        )

    @router.message(Command("roulette"))
    async def handle_roulette(message: Message) -> None:
        if not message.from_user:
            return
        args = command_args(message.text)
        if not args:
            await reply_to(message, "Pick a number: /roulette <0-36> [wager]")
            return

        async def action(pid: str) -> RoundReport:
            number = parse_amount(args[0], allow_zero=True)
            return await casino.play_roulette(number, wager_arg(args, 1), profile_id=pid)

        await play(message, profile_for(message.from_user), action)

    @router.message(Command("plinko"))
    async def handle_plinko(message: Message) -> None:
        if not message.from_user:
            return
        args = command_args(message.text)
        await play(
            message,
            profile_for(message.from_user),
            lambda pid: casino.drop_plinko(wager_arg(args, 0), profile_id=pid),
        )

    @router.message(Command("hilo"))
    async def handle_hilo(message: Message) -> None:
        if not message.from_user:
            return
        args = command_args(message.text)
        await play(
            message,
            profile_for(message.from_user),
            lambda pid: casino.start_hilo(wager_arg(args, 0), profile_id=pid),
        )

    @router.message(Command("hi", "lo"))
    async def handle_guess(message: Message) -> None:
        if not message.from_user:
            return
        guess = (message.text or "").strip().split()[0].lstrip("/").split("@")[0]
        await play(
            message, profile_for(message.from_user), lambda pid: casino.guess_hilo(guess, profile_id=pid)
        )

    @router.message(Command("blackjack"))
    async def handle_blackjack(message: Message) -> None:
        if not message.from_user:
            return
        args = command_args(message.text)
        await play(
            message,
            profile_for(message.from_user),
            lambda pid: casino.deal_blackjack(wager_arg(args, 0), profile_id=pid),
        )

    @router.message(Command("hit"))
    async def handle_hit(message: Message) -> None:
        if message.from_user:
            await play(message, profile_for(message.from_user), lambda pid: casino.hit(profile_id=pid))

    @router.message(Command("stand"))
    async def handle_stand(message: Message) -> None:
        if message.from_user:
            await play(message, profile_for(message.from_user), lambda pid: casino.stand(profile_id=pid))

    @router.message(Command("holdem"))
    async def handle_holdem(message: Message) -> None:
        if not message.from_user:
            return
        args = command_args(message.text)
        await play(
            message,
            profile_for(message.from_user),
            lambda pid: casino.deal_holdem(wager_arg(args, 0), profile_id=pid),
        )

    @router.message(Command("next"))
    async def handle_next(message: Message) -> None:
        if message.from_user:
            await play(
                message, profile_for(message.from_user), lambda pid: casino.advance_holdem(profile_id=pid)
            )

    @router.message(Command("daily"))
    async def handle_daily(message: Message) -> None:
        if not message.from_user:
            return
        profile_id = profile_for(message.from_user)

        async def action() -> str:
            return (await casino.claim_daily(profile_id=profile_id)).narration

        await respond(message, action)

    @router.message(Command("weekly"))
    async def handle_weekly(message: Message) -> None:
        if not message.from_user:
            return
        profile_id = profile_for(message.from_user)

        async def action() -> str:
            return (await casino.claim_weekly(profile_id=profile_id)).narration

        await respond(message, action)

    @router.message(Command("shop"))
    async def handle_shop(message: Message) -> None:
        if not message.from_user:
            return
        ledger = await casino.ledger(profile_for(message.from_user))
        await reply_to(message, format_shop(app.catalog, ledger))

    @router.message(Command("buy", "equip"))
    async def handle_cosmetic(message: Message) -> None:
        if not message.from_user:
            return
        parts = (message.text or "").strip().split()
        verb = parts[0].lstrip("/").split("@")[0].lower() if parts else "buy"
        if len(parts) < 2:
            await reply_to(message, f"Usage: /{verb} <item_id>. See /shop.")
            return
        profile_id = profile_for(message.from_user)
        operation = casino.purchase if verb == "buy" else casino.equip

        async def action() -> str:
            return await operation(parts[1], profile_id=profile_id)

        await respond(message, action)

    @router.message(Command("history"))
    async def handle_history(message: Message) -> None:
        if not message.from_user:
            return
        entries = await casino.history(profile_for(message.from_user), limit=10)
        await reply_to(message, format_history(entries))

    @router.message(Command("today"))
    async def handle_today(message: Message) -> None:
        await reply_to(
            message,
            format_today(
                casino.time_context(), golden_multiplier=app.config.bonus.golden_multiplier
            ),
        )

    @router.message(Command("reset"))
    async def handle_reset(message: Message) -> None:
        if not message.from_user:
            return
        ledger = await casino.reset_profile(profile_id=profile_for(message.from_user))
        await reply_to(message, f"Fresh start! Balance reset to ${ledger.balance}.")

    @router.callback_query(lambda c: c.data and c.data.startswith(f"{CALLBACK_PREFIX}:"))
    async def handle_callback(callback: CallbackQuery) -> None:
        if not callback.from_user or not callback.data:
            return
        profile_id = profile_for(callback.from_user)
        action = callback.data.split(":", 1)[1]
        await acknowledge(callback)
        message = callback.message
        if action == "lobby":
            await reply_to(message, render_help_message(), reply_markup=lobby_keyboard())
            return
        if action == "daily":
            try:
                claim = await casino.claim_daily(profile_id=profile_id)
                await reply_to(message, claim.narration)
            except NeonRoyalError as exc:
                await reply_to(message, format_error(exc))
            return
        round_action = callback_action(app, action)
        if round_action is None:
            await reply_to(message, "Unknown action.")
            return
        await play(message, profile_id, round_action)

    return router


def callback_action(app: CasinoApp, action: str) -> RoundAction | None:
    casino = app.casino
    name, _, arg = action.partition(":")
    if name == "slots":
        return lambda pid: casino.play_slots(profile_id=pid)
    if name == "plinko":
        return lambda pid: casino.drop_plinko(profile_id=pid)
    if name == "flip" and arg:
        return lambda pid: casino.flip_coin(arg, profile_id=pid)
    if name == "blackjack":
        return lambda pid: casino.deal_blackjack(profile_id=pid)
    if name == "bj" and arg == "hit":
        return lambda pid: casino.hit(profile_id=pid)
    if name == "bj" and arg == "stand":
        return lambda pid: casino.stand(profile_id=pid)
    if name == "hilo" and arg:
        return lambda pid: casino.guess_hilo(arg, profile_id=pid)
    if name == "hilo":
        return lambda pid: casino.start_hilo(profile_id=pid)
    if name == "holdem" and arg == "next":
        return lambda pid: casino.advance_holdem(profile_id=pid)
    if name == "holdem":
        return lambda pid: casino.deal_holdem(profile_id=pid)
    return None


def profile_for(user: User) -> str:
    return f"tg:{user.id}"


def command_args(text: str | None) -> list[str]:
    parts = (text or "").strip().split()
    return parts[1:]


def parse_amount(raw: str, *, allow_zero: bool = False) -> int:
    try:
        value = int(raw.lstrip("$"))
    except ValueError as exc:
        raise InvalidWager(f"'{raw}' is not a whole number") from exc
    if value < 0 or (value == 0 and not allow_zero):
        raise InvalidWager("Amount must be positive")
    return value


def wager_arg(args: Sequence[str], index: int) -> int | None:
    """Optional wager at ``args[index]``; ``None`` means the current bet."""
    if len(args) <= index:
        return None
    return parse_amount(args[index])


def report_keyboard(report: RoundReport) -> InlineKeyboardMarkup | None:
    if not report.resolved:
        factory = _IN_PROGRESS_KEYBOARDS.get(report.game_type)
        return factory() if factory else None
    action = _REPLAY_ACTIONS.get(report.game_type)
    return play_again_keyboard(action) if action else None


def format_error(exc: NeonRoyalError) -> str:
    if isinstance(exc, TooSoon):
        hours, rest = divmod(exc.seconds_remaining, 3600)
        minutes = rest // 60
        return f"⏳ Come back in {hours}h {minutes:02d}m."
    return f"⚠️ {exc}"


def format_report(report: RoundReport, balance: int) -> str:
    details = report.details
    lines: list[str] = []
    if "reels" in details:
        lines.append(" | ".join(details["reels"]))
    if "winning_number" in details:
        lines.append(
            f"🎡 {details['winning_number']} {details['colour']} (you picked {details['pick']})"
        )
    if "landed" in details:
        lines.append(f"🪙 {details['landed']}")
    if "slot" in details:
        lines.append(f"🟢 Slot {details['slot'] + 1} ({details['multiplier']}x)")
    if "player_hand" in details and report.game_type is GameType.BLACKJACK:
        lines.append(f"You: {details['player_hand']} ({details['player_score']})")
        dealer_score = details.get("dealer_score")
        suffix = f" ({dealer_score})" if dealer_score is not None else ""
        lines.append(f"Dealer: {details['dealer_hand']}{suffix}")
    if report.game_type is GameType.TEXAS_HOLDEM:
        lines.append(f"You: {details['player_hand']}  Dealer: {details['dealer_hand']}")
        if details.get("community"):
            lines.append(f"Board: {details['community']}")
    if "next_card" in details:
        lines.append(f"{details['base_card']} → {details['next_card']}")
    lines.append(report.narration)
    lines.append(f"💰 Balance: ${balance}")
    return "\n".join(lines)


def format_balance(ledger: PlayerLedger, catalog: ShopCatalog) -> str:
    badge = ""
    if ledger.equipped_accessory in catalog:
        badge = f" {catalog.get(ledger.equipped_accessory).cosmetic_value}"
    theme = ledger.equipped_theme
    if theme in catalog:
        theme = catalog.get(theme).name
    return "\n".join(
        [
            f"💰 Balance: ${ledger.balance}{badge}",
            f"🎯 Current bet: ${ledger.current_bet}",
            f"🎨 Theme: {theme}",
        ]
    )


def format_shop(catalog: ShopCatalog, ledger: PlayerLedger) -> str:
    lines = ["🛍️ Rewards shop:"]
    for kind, title in ((ItemKind.THEME, "Themes"), (ItemKind.ACCESSORY, "Accessories")):
        lines.append("")
        lines.append(f"{title}:")
        for item in catalog.iter_items(kind):
            if item.item_id in (ledger.equipped_theme, ledger.equipped_accessory):
                status = "equipped"
            elif item.item_id in ledger.owned_cosmetics:
                status = "owned"
            else:
                status = f"${item.price}"
            badge = f"{item.cosmetic_value} " if kind is ItemKind.ACCESSORY else ""
            lines.append(f"• {badge}{item.name} [{item.item_id}] {status}")
    lines.append("")
    lines.append("Buy with /buy <item_id>, wear with /equip <item_id>.")
    return "\n".join(lines)


def format_history(entries: Iterable[HistoryEntry]) -> str:
    lines = ["📜 Recent rounds:"]
    for entry in entries:
        sign = "+" if entry.signed_amount > 0 else ("-" if entry.signed_amount < 0 else "±")
        game = entry.game_type.display_name
        lines.append(f"• {entry.timestamp:%H:%M} {game}: {entry.outcome.value} {sign}${entry.amount}")
    if len(lines) == 1:
        return "No rounds played yet."
    return "\n".join(lines)


def format_today(context: TimeContext, *, golden_multiplier: float) -> str:
    lines = [f"📅 {context.weekday.label}: {context.active_bonus_label}"]
    if context.is_golden_hour:
        lines.append(f"✨ Golden hour! Wins pay {golden_multiplier:g}x right now.")
    if context.is_graveyard:
        lines.append("🌙 Graveyard shift. The tables are quiet.")
    return "\n".join(lines)


def render_help_message() -> str:
    return "\n".join(
        [
            "Welcome to Neon Royal! Play with virtual credits only.",
            "",
            "Games:",
            "• /slots [wager], /plinko [wager]",
            "• /flip heads|tails [wager]",
            "• /roulette <0-36> [wager]",
            "• /hilo [wager], then /hi or /lo",
            "• /blackjack [wager], then /hit or /stand",
            "• /holdem [wager], then /next",
            "",
            "Account: /balance, /bet <amount>, /history, /today, /reset",
            "Rewards: /daily, /weekly, /shop, /buy <id>, /equip <id>",
        ]
    )
