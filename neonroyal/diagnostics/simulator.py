"""Return-to-player simulation for the rule engines."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from random import Random
from typing import Callable, Dict

from ..domain.bonuses import TimeContext
from ..domain.cards import hand_score
from ..domain.clock import Weekday
from ..domain.games import (
    BlackjackEngine,
    CoinFlipEngine,
    CoinSide,
    Guess,
    HiLoEngine,
    HoldemEngine,
    PlinkoEngine,
    RouletteEngine,
    RoundReport,
    SlotsEngine,
)
from ..domain.games.roulette import WHEEL
from ..domain.ledger import GameType, Outcome, PlayerLedger

# Hi-Lo strategy threshold: guess HI below an 8.
HILO_PIVOT = 8
BLACKJACK_STAND_ON = 17

_EPOCH = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)


@dataclass(slots=True)
class SimulationResult:
    game_type: GameType
    rounds: int
    wagered: int = 0
    paid: int = 0
    outcomes: Dict[Outcome, int] = field(default_factory=dict)

    @property
    def rtp(self) -> float:
        return self.paid / self.wagered if self.wagered else 0.0

    def record(self, report: RoundReport) -> None:
        self.wagered += report.wager
        self.paid += report.payout or 0
        self.outcomes[report.outcome] = self.outcomes.get(report.outcome, 0) + 1


def plain_context(weekday: Weekday = Weekday.MONDAY, hour: int = 12) -> TimeContext:
    """A context with no golden-hour or global boosts."""
    return TimeContext(
        weekday=weekday,
        hour=hour,
        is_golden_hour=False,
        is_graveyard=False,
        active_bonus_label="",
    )


class CasinoSimulator:
    """Monte-Carlo simulation to evaluate the house edge of each game."""

    def __init__(self, *, rng: Random | None = None, context: TimeContext | None = None) -> None:
        self._rng = rng or Random()
        self._context = context or plain_context()
        self._runners: dict[GameType, Callable[[PlayerLedger, int], RoundReport]] = {
            GameType.SLOTS: self._slots,
            GameType.ROULETTE: self._roulette,
            GameType.COIN_FLIP: self._coin_flip,
            GameType.PLINKO: self._plinko,
            GameType.HI_LO: self._hilo,
            GameType.BLACKJACK: self._blackjack,
            GameType.TEXAS_HOLDEM: self._holdem,
        }
        self._slots_engine = SlotsEngine(self._rng)
        self._roulette_engine = RouletteEngine(self._rng)
        self._coin_engine = CoinFlipEngine(self._rng)
        self._plinko_engine = PlinkoEngine(self._rng)
        self._hilo_engine = HiLoEngine(self._rng)
        self._blackjack_engine = BlackjackEngine(self._rng)
        self._holdem_engine = HoldemEngine(self._rng)

    def simulate(
        self, game_type: GameType, *, rounds: int = 1000, wager: int = 10
    ) -> SimulationResult:
        if rounds <= 0:
            raise ValueError("Rounds must be positive")
        runner = self._runners[game_type]
        ledger = PlayerLedger(balance=wager * rounds, current_bet=wager, history_limit=1)
        result = SimulationResult(game_type=game_type, rounds=rounds)
        for _ in range(rounds):
            result.record(runner(ledger, wager))
        return result

    def _slots(self, ledger: PlayerLedger, wager: int) -> RoundReport:
        return self._slots_engine.spin(ledger, wager, context=self._context, now=_EPOCH)

    def _roulette(self, ledger: PlayerLedger, wager: int) -> RoundReport:
        number = WHEEL[int(self._rng.random() * len(WHEEL))]
        return self._roulette_engine.spin(ledger, wager, number, context=self._context, now=_EPOCH)

    def _coin_flip(self, ledger: PlayerLedger, wager: int) -> RoundReport:
        call = CoinSide.HEADS if self._rng.random() < 0.5 else CoinSide.TAILS
        return self._coin_engine.flip(ledger, wager, call, context=self._context, now=_EPOCH)

    def _plinko(self, ledger: PlayerLedger, wager: int) -> RoundReport:
        return self._plinko_engine.drop(ledger, wager, context=self._context, now=_EPOCH)

    def _hilo(self, ledger: PlayerLedger, wager: int) -> RoundReport:
        engine = self._hilo_engine
        engine.start(ledger, wager, context=self._context, now=_EPOCH)
        guess = Guess.HI if engine.base_card.rank < HILO_PIVOT else Guess.LO
        return engine.guess(ledger, guess, now=_EPOCH)

    def _blackjack(self, ledger: PlayerLedger, wager: int) -> RoundReport:
        engine = self._blackjack_engine
        report = engine.deal(ledger, wager, context=self._context, now=_EPOCH)
        while not report.resolved and hand_score(engine.player_hand) < BLACKJACK_STAND_ON:
            report = engine.hit(ledger, now=_EPOCH)
        if not report.resolved:
            report = engine.stand(ledger, now=_EPOCH)
        return report

    def _holdem(self, ledger: PlayerLedger, wager: int) -> RoundReport:
        engine = self._holdem_engine
        report = engine.deal(ledger, wager, context=self._context, now=_EPOCH)
        while not report.resolved:
            report = engine.advance(ledger, now=_EPOCH)
        return report
