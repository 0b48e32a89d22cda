"""Async application service that runs casino actions against a stored ledger."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from random import Random
from typing import Any, Callable, DefaultDict, Mapping, Sequence, TypeVar

from .config import LedgerConfig
from .domain.bonuses import BonusResolver, TimeContext
from .domain.clock import Clock, SystemClock
from .domain.events import BonusClaimed, CosmeticChanged, EventBus, LedgerReset, RoundSettled
from .domain.exceptions import CorruptPersistedState, NeonRoyalError
from .domain.games import (
    BlackjackEngine,
    CoinFlipEngine,
    CoinSide,
    GameEngine,
    Guess,
    HiLoEngine,
    HoldemEngine,
    PlinkoEngine,
    RouletteEngine,
    RoundReport,
    SlotsEngine,
)
from .domain.ledger import GameType, HistoryEntry, PlayerLedger
from .domain.rewards import BonusClaim, RewardsCalendar
from .domain.shop import ItemKind, ShopCatalog, equip_item, purchase_item
from .storage.base import LedgerStore

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")
EngineFactory = Callable[[Random], "dict[GameType, GameEngine]"]


@dataclass(slots=True)
class CasinoSession:
    """A loaded ledger and the engines that act on it."""

    profile_id: str
    ledger: PlayerLedger
    engines: dict[GameType, GameEngine] = field(default_factory=dict)
    recovered: bool = False

    def engine(self, game_type: GameType) -> GameEngine:
        return self.engines[game_type]


def default_engines(rng: Random) -> dict[GameType, GameEngine]:
    return {
        GameType.SLOTS: SlotsEngine(rng),
        GameType.BLACKJACK: BlackjackEngine(rng),
        GameType.ROULETTE: RouletteEngine(rng),
        GameType.HI_LO: HiLoEngine(rng),
        GameType.COIN_FLIP: CoinFlipEngine(rng),
        GameType.TEXAS_HOLDEM: HoldemEngine(rng),
        GameType.PLINKO: PlinkoEngine(rng),
    }


class CasinoService:
    """Run one player action to completion, persist it, then notify listeners.

    Sessions are cached per profile so multi-step rounds (blackjack,
    Hi-Lo, Hold'em) survive between calls. Actions on the same profile are
    serialized with a lock; every action either fully applies or leaves the
    ledger untouched.
    """

    def __init__(
        self,
        store: LedgerStore,
        *,
        ledger_config: LedgerConfig,
        resolver: BonusResolver,
        rewards: RewardsCalendar,
        catalog: ShopCatalog,
        event_bus: EventBus,
        clock: Clock | None = None,
        rng: Random | None = None,
        engine_factory: EngineFactory = default_engines,
        default_profile: str = "local",
    ) -> None:
        self._store = store
        self._ledger_config = ledger_config
        self._resolver = resolver
        self._rewards = rewards
        self._catalog = catalog
        self._event_bus = event_bus
        self._clock = clock or SystemClock()
        self._rng = rng or Random()
        self._engine_factory = engine_factory
        self._default_profile = default_profile
        self._sessions: dict[str, CasinoSession] = {}
        self._locks: DefaultDict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    @property
    def catalog(self) -> ShopCatalog:
        return self._catalog

    @property
    def rewards(self) -> RewardsCalendar:
        return self._rewards

    def now(self) -> datetime:
        return self._clock.now()

    def time_context(self, now: datetime | None = None) -> TimeContext:
        return self._resolver.resolve(now or self._clock.now())

    # ------------------------------------------------------------------ sessions

    async def session(self, profile_id: str | None = None) -> CasinoSession:
        profile_id = profile_id or self._default_profile
        cached = self._sessions.get(profile_id)
        if cached is not None:
            return cached
        async with self._locks[profile_id]:
            return await self._session_unlocked(profile_id)

    async def ledger(self, profile_id: str | None = None) -> PlayerLedger:
        return (await self.session(profile_id)).ledger

    async def history(
        self, profile_id: str | None = None, *, limit: int | None = None
    ) -> Sequence[HistoryEntry]:
        entries = (await self.ledger(profile_id)).history
        return list(entries[:limit] if limit is not None else entries)

    async def snapshot(self, profile_id: str | None = None) -> dict[str, Any]:
        return (await self.ledger(profile_id)).to_snapshot()

    def forget(self, profile_id: str | None = None) -> None:
        """Drop the cached session so the next action reloads from the store."""
        self._sessions.pop(profile_id or self._default_profile, None)

    async def _session_unlocked(self, profile_id: str) -> CasinoSession:
        cached = self._sessions.get(profile_id)
        if cached is not None:
            return cached
        recovered = False
        try:
            ledger = self._restore(await self._store.load(profile_id))
        except CorruptPersistedState as exc:
            logger.warning("Discarding corrupt ledger for profile %s: %s", profile_id, exc)
            ledger = PlayerLedger.new(self._ledger_config)
            recovered = True
        if ledger.has_open_round:
            entry = ledger.forfeit_open_round(now=self._clock.now())
            logger.info(
                "Forfeited unfinished %s stake of %s for profile %s",
                entry.game_type.value,
                entry.amount,
                profile_id,
            )
            await self._store.save(profile_id, ledger.to_snapshot())
        session = CasinoSession(
            profile_id=profile_id,
            ledger=ledger,
            engines=self._engine_factory(self._rng),
            recovered=recovered,
        )
        self._sessions[profile_id] = session
        return session

    def _restore(self, raw: Mapping[str, Any] | None) -> PlayerLedger:
        if raw is None:
            return PlayerLedger.new(self._ledger_config)
        ledger = PlayerLedger.from_snapshot(raw, history_limit=self._ledger_config.history_limit)
        slots = (
            (ledger.equipped_theme, ItemKind.THEME),
            (ledger.equipped_accessory, ItemKind.ACCESSORY),
        )
        for item_id, kind in slots:
            if not item_id:
                continue
            if item_id not in self._catalog or self._catalog.get(item_id).kind is not kind:
                raise CorruptPersistedState(
                    f"Equipped {kind.value.lower()} '{item_id}' is not a known {kind.value.lower()}"
                )
        return ledger

    async def _run(
        self,
        profile_id: str | None,
        action: Callable[[CasinoSession, datetime, TimeContext], ResultT],
    ) -> ResultT:
        profile_id = profile_id or self._default_profile
        async with self._locks[profile_id]:
            session = await self._session_unlocked(profile_id)
            now = self._clock.now()
            context = self._resolver.resolve(now)
            try:
                result = action(session, now, context)
            except NeonRoyalError as exc:
                logger.info("Rejected action for profile %s: %s", profile_id, exc)
                raise
            await self._store.save(profile_id, session.ledger.to_snapshot())
            return result

    async def _play(
        self,
        profile_id: str | None,
        action: Callable[[CasinoSession, datetime, TimeContext], RoundReport],
    ) -> RoundReport:
        report = await self._run(profile_id, action)
        if report.resolved:
            await self._announce_round(profile_id or self._default_profile, report)
        return report

    async def _announce_round(self, profile_id: str, report: RoundReport) -> None:
        ledger = self._sessions[profile_id].ledger
        logger.debug(
            "%s round settled for %s: wager=%s payout=%s outcome=%s",
            report.game_type.value,
            profile_id,
            report.wager,
            report.payout,
            report.outcome.value if report.outcome else None,
        )
        await self._event_bus.publish(
            RoundSettled(
                profile_id=profile_id,
                entry=report.entry,
                payout=report.payout or 0,
                balance=ledger.balance,
                narration=report.narration,
            )
        )

    @staticmethod
    def _wager(ledger: PlayerLedger, wager: int | None) -> int:
        return ledger.current_bet if wager is None else wager

    # -------------------------------------------------------------------- ledger

    async def set_bet(self, amount: int, *, profile_id: str | None = None) -> PlayerLedger:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> PlayerLedger:
            session.ledger.set_bet(amount)
            return session.ledger

        return await self._run(profile_id, action)

    async def reset_profile(
        self, *, profile_id: str | None = None, reason: str = "player reset"
    ) -> PlayerLedger:
        profile_id = profile_id or self._default_profile
        async with self._locks[profile_id]:
            ledger = PlayerLedger.new(self._ledger_config)
            self._sessions[profile_id] = CasinoSession(
                profile_id=profile_id,
                ledger=ledger,
                engines=self._engine_factory(self._rng),
            )
            await self._store.save(profile_id, ledger.to_snapshot())
        logger.info("Profile %s reset (%s)", profile_id, reason)
        await self._event_bus.publish(LedgerReset(profile_id=profile_id, reason=reason))
        return ledger

    # --------------------------------------------------------------------- games

    async def play_slots(
        self, wager: int | None = None, *, profile_id: str | None = None
    ) -> RoundReport:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> RoundReport:
            engine = session.engine(GameType.SLOTS)
            return engine.spin(
                session.ledger, self._wager(session.ledger, wager), context=context, now=now
            )

        return await self._play(profile_id, action)

    async def play_roulette(
        self, number: int, wager: int | None = None, *, profile_id: str | None = None
    ) -> RoundReport:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> RoundReport:
            engine = session.engine(GameType.ROULETTE)
            return engine.spin(
                session.ledger, self._wager(session.ledger, wager), number, context=context, now=now
            )

        return await self._play(profile_id, action)

    async def flip_coin(
        self, call: CoinSide | str, wager: int | None = None, *, profile_id: str | None = None
    ) -> RoundReport:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> RoundReport:
            engine = session.engine(GameType.COIN_FLIP)
            return engine.flip(
                session.ledger, self._wager(session.ledger, wager), call, context=context, now=now
            )

        return await self._play(profile_id, action)

    async def drop_plinko(
        self, wager: int | None = None, *, profile_id: str | None = None
    ) -> RoundReport:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> RoundReport:
            engine = session.engine(GameType.PLINKO)
            return engine.drop(
                session.ledger, self._wager(session.ledger, wager), context=context, now=now
            )

        return await self._play(profile_id, action)

    async def start_hilo(
        self, wager: int | None = None, *, profile_id: str | None = None
    ) -> RoundReport:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> RoundReport:
            engine = session.engine(GameType.HI_LO)
            return engine.start(
                session.ledger, self._wager(session.ledger, wager), context=context, now=now
            )

        return await self._play(profile_id, action)

    async def guess_hilo(self, guess: Guess | str, *, profile_id: str | None = None) -> RoundReport:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> RoundReport:
            engine = session.engine(GameType.HI_LO)
            return engine.guess(session.ledger, guess, now=now)

        return await self._play(profile_id, action)

    async def deal_blackjack(
        self, wager: int | None = None, *, profile_id: str | None = None
    ) -> RoundReport:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> RoundReport:
            engine = session.engine(GameType.BLACKJACK)
            return engine.deal(
                session.ledger, self._wager(session.ledger, wager), context=context, now=now
            )

        return await self._play(profile_id, action)

    async def hit(self, *, profile_id: str | None = None) -> RoundReport:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> RoundReport:
            engine = session.engine(GameType.BLACKJACK)
            return engine.hit(session.ledger, now=now)

        return await self._play(profile_id, action)

    async def stand(self, *, profile_id: str | None = None) -> RoundReport:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> RoundReport:
            engine = session.engine(GameType.BLACKJACK)
            return engine.stand(session.ledger, now=now)

        return await self._play(profile_id, action)

    async def deal_holdem(
        self, wager: int | None = None, *, profile_id: str | None = None
    ) -> RoundReport:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> RoundReport:
            engine = session.engine(GameType.TEXAS_HOLDEM)
            return engine.deal(
                session.ledger, self._wager(session.ledger, wager), context=context, now=now
            )

        return await self._play(profile_id, action)

    async def advance_holdem(self, *, profile_id: str | None = None) -> RoundReport:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> RoundReport:
            engine = session.engine(GameType.TEXAS_HOLDEM)
            return engine.advance(session.ledger, now=now)

        return await self._play(profile_id, action)

    # ------------------------------------------------------------------- rewards

    async def claim_daily(self, *, profile_id: str | None = None) -> BonusClaim:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> BonusClaim:
            return self._rewards.claim_daily(session.ledger, now, context)

        return await self._claim(profile_id, action)

    async def claim_weekly(self, *, profile_id: str | None = None) -> BonusClaim:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> BonusClaim:
            return self._rewards.claim_weekly(session.ledger, now, context)

        return await self._claim(profile_id, action)

    async def _claim(
        self,
        profile_id: str | None,
        action: Callable[[CasinoSession, datetime, TimeContext], BonusClaim],
    ) -> BonusClaim:
        profile_id = profile_id or self._default_profile
        claim = await self._run(profile_id, action)
        balance = self._sessions[profile_id].ledger.balance
        logger.debug("%s bonus of %s claimed by %s", claim.kind, claim.amount, profile_id)
        await self._event_bus.publish(
            BonusClaimed(
                profile_id=profile_id,
                kind=claim.kind,
                amount=claim.amount,
                balance=balance,
                narration=claim.narration,
            )
        )
        return claim

    # ---------------------------------------------------------------------- shop

    async def purchase(self, item_id: str, *, profile_id: str | None = None) -> str:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> str:
            return purchase_item(session.ledger, self._catalog.get(item_id))

        return await self._cosmetic(profile_id, item_id, action, purchased=True)

    async def equip(self, item_id: str, *, profile_id: str | None = None) -> str:
        def action(session: CasinoSession, now: datetime, context: TimeContext) -> str:
            return equip_item(session.ledger, self._catalog.get(item_id))

        return await self._cosmetic(profile_id, item_id, action, purchased=False)

    async def _cosmetic(
        self,
        profile_id: str | None,
        item_id: str,
        action: Callable[[CasinoSession, datetime, TimeContext], str],
        *,
        purchased: bool,
    ) -> str:
        profile_id = profile_id or self._default_profile
        narration = await self._run(profile_id, action)
        await self._event_bus.publish(
            CosmeticChanged(
                profile_id=profile_id,
                item_id=item_id,
                purchased=purchased,
                balance=self._sessions[profile_id].ledger.balance,
                narration=narration,
            )
        )
        return narration

