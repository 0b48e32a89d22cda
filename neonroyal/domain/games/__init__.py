"""Rule engines, one per game type."""

from .base import GameEngine, RoundPhase, RoundReport
from .blackjack import BlackjackEngine
from .coinflip import CoinFlipEngine, CoinSide
from .hilo import Guess, HiLoEngine
from .holdem import HoldemEngine, Street
from .plinko import PlinkoEngine
from .roulette import RouletteEngine
from .slots import SlotsEngine

__all__ = [
    "GameEngine",
    "RoundPhase",
    "RoundReport",
    "BlackjackEngine",
    "CoinFlipEngine",
    "CoinSide",
    "Guess",
    "HiLoEngine",
    "HoldemEngine",
    "Street",
    "PlinkoEngine",
    "RouletteEngine",
    "SlotsEngine",
]
