from datetime import datetime, timezone
from random import Random

import pytest

from neonroyal.config import BonusConfig
from neonroyal.domain.bonuses import BonusResolver
from neonroyal.domain.cards import Suit, blackjack_deck, hand_score
from neonroyal.domain.exceptions import InvalidWager, NoRoundInProgress, RoundInProgress
from neonroyal.domain.games import (
    BlackjackEngine,
    CoinFlipEngine,
    HiLoEngine,
    HoldemEngine,
    PlinkoEngine,
    RouletteEngine,
    RoundPhase,
    SlotsEngine,
    Street,
)
from neonroyal.domain.games.hilo import Guess, guess_wins
from neonroyal.domain.games.plinko import bucket_index
from neonroyal.domain.ledger import Outcome, PlayerLedger
from neonroyal.testing import ScriptedRandom, bj_cards, draw_values, hi_cards, stacked_deck

MONDAY = datetime(2024, 1, 15, 12, tzinfo=timezone.utc)
TUESDAY = datetime(2024, 1, 16, 12, tzinfo=timezone.utc)
WEDNESDAY = datetime(2024, 1, 17, 12, tzinfo=timezone.utc)
THURSDAY = datetime(2024, 1, 18, 12, tzinfo=timezone.utc)
SATURDAY_GOLDEN = datetime(2024, 1, 20, 17, tzinfo=timezone.utc)
SUNDAY = datetime(2024, 1, 21, 12, tzinfo=timezone.utc)

RESOLVER = BonusResolver(BonusConfig(timezone="UTC"))
SWEEP_SEEDS = range(1000)


def ctx(moment: datetime = MONDAY):
    return RESOLVER.resolve(moment)


@pytest.fixture()
def ledger() -> PlayerLedger:
    return PlayerLedger(balance=1000, current_bet=10)


def high_draws(*cards: tuple[Suit, str]) -> list[float]:
    values: list[float] = []
    for suit, label in cards:
        values.extend(draw_values(suit, label))
    return values


# --- blackjack -------------------------------------------------------------


def test_blackjack_dealer_bust_pays_double(ledger):
    deck = stacked_deck(*bj_cards("10", "10", "9", "6", "10"))
    engine = BlackjackEngine(ScriptedRandom(), deck_factory=deck)

    report = engine.deal(ledger, 10, context=ctx(), now=MONDAY)
    assert report.phase is RoundPhase.IN_PROGRESS
    assert report.details["player_score"] == 19
    assert report.details["dealer_score"] is None
    assert ledger.balance == 990

    report = engine.stand(ledger, now=MONDAY)
    assert report.resolved
    assert report.narration == "Dealer busts! You win."
    assert report.payout == 20
    assert ledger.balance == 1010
    assert len(ledger.history) == 1
    assert ledger.history[0].outcome is Outcome.WIN
    assert ledger.history[0].amount == 10


def test_blackjack_tuesday_pays_two_and_a_half(ledger):
    deck = stacked_deck(*bj_cards("10", "10", "9", "7"))
    engine = BlackjackEngine(ScriptedRandom(), deck_factory=deck)
    engine.deal(ledger, 10, context=ctx(TUESDAY), now=TUESDAY)
    report = engine.stand(ledger, now=TUESDAY)
    assert report.narration == "Win! 19 beats 17."
    assert report.payout == 25


def test_blackjack_bust_on_hit(ledger):
    deck = stacked_deck(*bj_cards("10", "10", "6", "7", "K"))
    engine = BlackjackEngine(ScriptedRandom(), deck_factory=deck)
    engine.deal(ledger, 10, context=ctx(), now=MONDAY)
    report = engine.hit(ledger, now=MONDAY)
    assert report.narration == "Bust! Dealer takes the pot."
    assert report.outcome is Outcome.LOSS
    assert report.details["dealer_score"] == 17
    assert ledger.balance == 990


def test_blackjack_push_returns_stake_even_with_boosts(ledger):
    deck = stacked_deck(*bj_cards("10", "10", "8", "8"))
    engine = BlackjackEngine(ScriptedRandom(), deck_factory=deck)
    engine.deal(ledger, 10, context=ctx(SATURDAY_GOLDEN), now=SATURDAY_GOLDEN)
    report = engine.stand(ledger, now=SATURDAY_GOLDEN)
    assert report.narration == "Draw. Bet returned."
    assert report.outcome is Outcome.PUSH
    assert ledger.balance == 1000


def test_blackjack_dealer_draws_to_seventeen(ledger):
    deck = stacked_deck(*bj_cards("10", "2", "7", "3", "4", "9"))
    engine = BlackjackEngine(ScriptedRandom(), deck_factory=deck)
    engine.deal(ledger, 10, context=ctx(), now=MONDAY)
    report = engine.stand(ledger, now=MONDAY)
    # Dealer 2 + 3 + 4 = 9, then 9 more for 18.
    assert report.details["dealer_score"] == 18
    assert report.narration == "Dealer wins with 18."


def test_blackjack_requires_open_round(ledger):
    engine = BlackjackEngine(ScriptedRandom())
    with pytest.raises(NoRoundInProgress):
        engine.hit(ledger, now=MONDAY)
    with pytest.raises(NoRoundInProgress):
        engine.stand(ledger, now=MONDAY)


def test_blackjack_cannot_deal_twice(ledger):
    deck = stacked_deck(*bj_cards("2", "3", "4", "5"))
    engine = BlackjackEngine(ScriptedRandom(), deck_factory=deck)
    engine.deal(ledger, 10, context=ctx(), now=MONDAY)
    with pytest.raises(RoundInProgress):
        engine.deal(ledger, 10, context=ctx(), now=MONDAY)
    assert ledger.balance == 990


def test_soft_ace_reduction():
    assert hand_score(bj_cards("A", "6")) == 17
    assert hand_score(bj_cards("A", "6", "10")) == 17
    assert hand_score(bj_cards("A", "A", "9")) == 21
    assert hand_score(bj_cards("K", "Q", "5")) == 25


def test_shuffled_deck_has_fifty_two_cards(ledger):
    engine = BlackjackEngine(ScriptedRandom(seed=7))
    engine.deal(ledger, 10, context=ctx(), now=MONDAY)
    assert len(engine.deck) == 48
    assert len(set(engine.deck + engine.player_hand + engine.dealer_hand)) == 52


def test_hand_score_reduces_aces_only_as_far_as_needed():
    for seed in SWEEP_SEEDS:
        deck = blackjack_deck(Random(seed))
        hand = [deck.pop() for _ in range(2 + seed % 7)]
        hard = sum(1 if card.is_ace else card.rank for card in hand)
        soft_available = any(card.is_ace for card in hand) and hard + 10 <= 21
        assert hand_score(hand) == (hard + 10 if soft_available else hard), seed


def test_dealer_stops_at_seventeen_across_seeds():
    for seed in SWEEP_SEEDS:
        ledger = PlayerLedger(balance=100, current_bet=10)
        engine = BlackjackEngine(Random(seed))
        engine.deal(ledger, 10, context=ctx(), now=MONDAY)
        report = engine.stand(ledger, now=MONDAY)

        dealer = engine.dealer_hand
        assert hand_score(dealer) >= 17, seed
        for drawn in range(2, len(dealer)):
            assert hand_score(dealer[:drawn]) < 17, seed
        assert report.payout in (0, 10, 20), seed


# --- slots -------------------------------------------------------------------


def test_slots_triple_seven(ledger):
    engine = SlotsEngine(ScriptedRandom([0.99, 0.99, 0.99]))
    report = engine.spin(ledger, 10, context=ctx(), now=MONDAY)
    assert report.details["reels"] == ["7️⃣", "7️⃣", "7️⃣"]
    assert report.payout == 1000
    assert report.narration == "JACKPOT! Three 7️⃣ in a row for $1000!"
    assert ledger.balance == 1990


def test_slots_pair_pays_one_and_a_half(ledger):
    engine = SlotsEngine(ScriptedRandom([0.1, 0.5, 0.1]))
    report = engine.spin(ledger, 10, context=ctx(), now=MONDAY)
    assert report.details["reels"] == ["🍒", "🍋", "🍒"]
    assert report.payout == 15
    assert report.narration == "Matched two! Won $15."


def test_slots_no_match(ledger):
    engine = SlotsEngine(ScriptedRandom([0.1, 0.4, 0.6]))
    report = engine.spin(ledger, 10, context=ctx(), now=MONDAY)
    assert report.payout == 0
    assert report.narration == "No luck this time."
    assert ledger.balance == 990


def test_slots_thursday_multiplier(ledger):
    engine = SlotsEngine(ScriptedRandom([0.1, 0.1, 0.1]))
    report = engine.spin(ledger, 10, context=ctx(THURSDAY), now=THURSDAY)
    assert report.payout == 30


# --- roulette --------------------------------------------------------------


def test_roulette_straight_up_win(ledger):
    engine = RouletteEngine(ScriptedRandom([0.23]))
    report = engine.spin(ledger, 10, 17, context=ctx(), now=MONDAY)
    assert report.details["winning_number"] == 17
    assert report.details["winning_index"] == 8
    assert report.payout == 350
    assert ledger.balance == 1340


def test_roulette_wednesday_pays_forty_five(ledger):
    engine = RouletteEngine(ScriptedRandom([0.0]))
    report = engine.spin(ledger, 10, 0, context=ctx(WEDNESDAY), now=WEDNESDAY)
    assert report.details["colour"] == "green"
    assert report.payout == 450


def test_roulette_loss_reports_colour(ledger):
    engine = RouletteEngine(ScriptedRandom([0.03]))
    report = engine.spin(ledger, 10, 17, context=ctx(), now=MONDAY)
    assert report.details["winning_number"] == 32
    assert report.narration == "The ball landed on 32 (red). Hard luck."
    assert ledger.balance == 990


def test_roulette_pays_nothing_or_the_full_multiple():
    for seed in SWEEP_SEEDS:
        ledger = PlayerLedger(balance=100, current_bet=10)
        pick = seed % 37
        report = RouletteEngine(Random(seed)).spin(ledger, 10, pick, context=ctx(), now=MONDAY)
        hit = report.details["winning_number"] == pick
        assert report.payout == (350 if hit else 0), seed
        assert ledger.balance == 90 + report.payout


@pytest.mark.parametrize("number", [-1, 37])
def test_roulette_rejects_numbers_off_the_wheel(ledger, number):
    engine = RouletteEngine(ScriptedRandom())
    with pytest.raises(InvalidWager):
        engine.spin(ledger, 10, number, context=ctx(), now=MONDAY)
    assert ledger.balance == 1000


# --- coin flip -------------------------------------------------------------


def test_coin_flip_loss_mentions_result(ledger):
    engine = CoinFlipEngine(ScriptedRandom([0.2]))
    report = engine.flip(ledger, 10, "HEADS", context=ctx(), now=MONDAY)
    assert ledger.balance == 990
    assert report.outcome is Outcome.LOSS
    assert "TAILS" in report.narration


def test_coin_flip_sunday_win(ledger):
    engine = CoinFlipEngine(ScriptedRandom([0.9]))
    report = engine.flip(ledger, 10, "heads", context=ctx(SUNDAY), now=SUNDAY)
    assert report.payout == 25
    assert report.narration == "It's HEADS! You won $25!"


def test_coin_flip_golden_saturday(ledger):
    engine = CoinFlipEngine(ScriptedRandom([0.9]))
    report = engine.flip(ledger, 10, "HEADS", context=ctx(SATURDAY_GOLDEN), now=SATURDAY_GOLDEN)
    assert report.payout == 36


def test_coin_flip_rejects_unknown_call(ledger):
    engine = CoinFlipEngine(ScriptedRandom())
    with pytest.raises(InvalidWager):
        engine.flip(ledger, 10, "edge", context=ctx(), now=MONDAY)
    assert ledger.balance == 1000


# --- plinko ----------------------------------------------------------------


def test_plinko_edge_slot(ledger):
    engine = PlinkoEngine(ScriptedRandom([0.9] * 8))
    report = engine.drop(ledger, 10, context=ctx(), now=MONDAY)
    assert report.details["slot"] == 7
    assert report.payout == 50
    assert len(report.details["path"]) == 9
    assert report.narration == "Ball landed in 5x slot! Won $50."


def test_plinko_centre_slot_is_a_loss(ledger):
    engine = PlinkoEngine(ScriptedRandom([0.9, 0.1] * 4))
    report = engine.drop(ledger, 10, context=ctx(), now=MONDAY)
    assert report.details["slot"] == 4
    assert report.payout == 2
    assert report.outcome is Outcome.LOSS
    assert ledger.history[0].amount == 8


@pytest.mark.parametrize(
    ("final_x", "slot"),
    [(10, 0), (30, 0), (40, 2), (50, 4), (60, 6), (70, 7), (90, 7)],
)
def test_plinko_buckets(final_x, slot):
    assert bucket_index(final_x) == slot


# --- hi-lo -----------------------------------------------------------------


def test_hilo_correct_high_guess(ledger):
    rng = ScriptedRandom(high_draws((Suit.HEARTS, "7"), (Suit.CLUBS, "K")))
    engine = HiLoEngine(rng)
    engine.start(ledger, 10, context=ctx(), now=MONDAY)
    assert str(engine.base_card) == "7♥"
    report = engine.guess(ledger, Guess.HI, now=MONDAY)
    assert report.payout == 18
    assert report.details["next_card"] == "K♣"
    assert ledger.balance == 1008


def test_hilo_wrong_guess(ledger):
    rng = ScriptedRandom(high_draws((Suit.HEARTS, "7"), (Suit.CLUBS, "2")))
    engine = HiLoEngine(rng)
    engine.start(ledger, 10, context=ctx(SUNDAY), now=SUNDAY)
    report = engine.guess(ledger, "hi", now=SUNDAY)
    assert report.outcome is Outcome.LOSS
    assert ledger.balance == 990


def test_hilo_sunday_tie_wins(ledger):
    rng = ScriptedRandom(high_draws((Suit.HEARTS, "A"), (Suit.SPADES, "A")))
    engine = HiLoEngine(rng)
    engine.start(ledger, 10, context=ctx(SUNDAY), now=SUNDAY)
    report = engine.guess(ledger, "LO", now=SUNDAY)
    assert report.payout == 25


def test_guess_wins_ties_in_both_directions():
    seven, king = hi_cards("7", "K")
    assert guess_wins(Guess.HI, seven, seven)
    assert guess_wins(Guess.LO, seven, seven)
    assert guess_wins(Guess.HI, seven, king)
    assert not guess_wins(Guess.LO, seven, king)


def test_hilo_guess_without_round(ledger):
    with pytest.raises(NoRoundInProgress):
        HiLoEngine(ScriptedRandom()).guess(ledger, Guess.HI, now=MONDAY)


# --- hold'em ---------------------------------------------------------------


def _play_holdem(ledger, rng, moment=MONDAY):
    engine = HoldemEngine(rng)
    reports = [engine.deal(ledger, 10, context=ctx(moment), now=moment)]
    while not reports[-1].resolved:
        reports.append(engine.advance(ledger, now=moment))
    return engine, reports


def test_holdem_streets_and_player_win(ledger):
    draws = high_draws(
        (Suit.SPADES, "A"), (Suit.SPADES, "2"),
        (Suit.HEARTS, "3"), (Suit.HEARTS, "4"),
        (Suit.CLUBS, "5"), (Suit.CLUBS, "6"), (Suit.CLUBS, "7"),
        (Suit.DIAMONDS, "8"),
        (Suit.DIAMONDS, "9"),
    )
    engine, reports = _play_holdem(ledger, ScriptedRandom(draws))
    assert [r.details["street"] for r in reports] == ["HOLE", "FLOP", "TURN", "RIVER", "SHOWDOWN"]
    assert reports[0].details["dealer_hand"] == "🂠 🂠"
    assert len(engine.community) == 5
    final = reports[-1]
    assert final.payout == 30
    assert final.details["player_high"] == 14
    assert final.details["dealer_high"] == 9
    assert engine.street is Street.SHOWDOWN
    assert ledger.balance == 1020


def test_holdem_tie_is_a_push(ledger):
    draws = high_draws(
        (Suit.SPADES, "2"), (Suit.SPADES, "3"),
        (Suit.HEARTS, "4"), (Suit.HEARTS, "5"),
        (Suit.CLUBS, "K"), (Suit.CLUBS, "6"), (Suit.CLUBS, "7"),
        (Suit.DIAMONDS, "8"),
        (Suit.DIAMONDS, "9"),
    )
    _, reports = _play_holdem(ledger, ScriptedRandom(draws))
    assert reports[-1].outcome is Outcome.PUSH
    assert reports[-1].narration == "It's a push! Tie on high card."
    assert ledger.balance == 1000


def test_payout_terms_are_locked_at_wager_time(ledger):
    # Dealt on Tuesday, stood after midnight: still pays the Tuesday rate.
    deck = stacked_deck(*bj_cards("10", "10", "9", "7"))
    engine = BlackjackEngine(ScriptedRandom(), deck_factory=deck)
    engine.deal(ledger, 10, context=ctx(TUESDAY), now=TUESDAY)
    report = engine.stand(ledger, now=WEDNESDAY)
    assert report.payout == 25
