from datetime import datetime, timezone

import pytest

from neonroyal.config import LedgerConfig
from neonroyal.domain.exceptions import (
    CorruptPersistedState,
    InsufficientFunds,
    InvalidWager,
    NoRoundInProgress,
    RoundInProgress,
)
from neonroyal.domain.ledger import DEFAULT_THEME_ID, GameType, Outcome, PlayerLedger, classify
from neonroyal.testing import LedgerFactory

NOW = datetime(2024, 1, 15, 12, tzinfo=timezone.utc)


def test_new_ledger_uses_config_defaults():
    ledger = PlayerLedger.new(LedgerConfig())
    assert ledger.balance == 1000
    assert ledger.current_bet == 10
    assert ledger.history == []
    assert ledger.owned_cosmetics == {DEFAULT_THEME_ID}
    assert ledger.equipped_theme == DEFAULT_THEME_ID
    assert ledger.equipped_accessory == ""


def test_wager_above_balance_is_rejected_without_changes():
    ledger = PlayerLedger(balance=100, current_bet=10)
    with pytest.raises(InsufficientFunds) as excinfo:
        ledger.place_wager(500, GameType.SLOTS)
    assert excinfo.value.needed == 500
    assert ledger.balance == 100
    assert ledger.history == []
    assert not ledger.has_open_round


@pytest.mark.parametrize("amount", [0, -5])
def test_non_positive_wager_is_invalid(amount):
    ledger = PlayerLedger(balance=100, current_bet=10)
    with pytest.raises(InvalidWager):
        ledger.place_wager(amount, GameType.SLOTS)
    assert ledger.balance == 100


def test_wager_equal_to_balance_is_allowed():
    ledger = PlayerLedger(balance=100, current_bet=10)
    ledger.place_wager(100, GameType.COIN_FLIP)
    assert ledger.balance == 0
    entry = ledger.settle_round(GameType.COIN_FLIP, 0, "lost", now=NOW)
    assert entry.outcome is Outcome.LOSS
    assert ledger.balance == 0


def test_only_one_open_wager_at_a_time():
    ledger = PlayerLedger(balance=100, current_bet=10)
    ledger.place_wager(10, GameType.BLACKJACK)
    with pytest.raises(RoundInProgress):
        ledger.place_wager(10, GameType.SLOTS)
    assert ledger.balance == 90


def test_settle_requires_matching_open_wager():
    ledger = PlayerLedger(balance=100, current_bet=10)
    with pytest.raises(NoRoundInProgress):
        ledger.settle_round(GameType.SLOTS, 10, "nope", now=NOW)
    ledger.place_wager(10, GameType.SLOTS)
    with pytest.raises(NoRoundInProgress):
        ledger.settle_round(GameType.ROULETTE, 10, "wrong game", now=NOW)


def test_settle_records_net_change_newest_first():
    ledger = PlayerLedger(balance=1000, current_bet=10)
    ledger.place_wager(10, GameType.BLACKJACK)
    first = ledger.settle_round(GameType.BLACKJACK, 20, "Dealer busts! You win.", now=NOW)
    ledger.place_wager(10, GameType.SLOTS)
    second = ledger.settle_round(GameType.SLOTS, 0, "No luck this time.", now=NOW)

    assert ledger.balance == 1000
    assert ledger.history == [second, first]
    assert first.amount == 10 and first.outcome is Outcome.WIN
    assert second.amount == 10 and second.outcome is Outcome.LOSS
    assert ledger.last_event == "No luck this time."
    assert not ledger.has_open_round


def test_push_records_zero_amount():
    ledger = PlayerLedger(balance=50, current_bet=10)
    ledger.place_wager(10, GameType.BLACKJACK)
    entry = ledger.settle_round(GameType.BLACKJACK, 10, "Draw. Bet returned.", now=NOW)
    assert entry.outcome is Outcome.PUSH
    assert entry.amount == 0
    assert entry.signed_amount == 0
    assert ledger.balance == 50


def test_classify():
    assert classify(10, 25) is Outcome.WIN
    assert classify(10, 10) is Outcome.PUSH
    assert classify(10, 2) is Outcome.LOSS


def test_history_is_capped():
    ledger = PlayerLedger(balance=1000, current_bet=1, history_limit=50)
    for _ in range(55):
        ledger.place_wager(1, GameType.COIN_FLIP)
        ledger.settle_round(GameType.COIN_FLIP, 0, "lost", now=NOW)
    assert len(ledger.history) == 50
    assert ledger.balance == 945


def test_set_bet_validates_amount():
    ledger = PlayerLedger(balance=100, current_bet=10)
    ledger.set_bet(50)
    assert ledger.current_bet == 50
    with pytest.raises(InsufficientFunds):
        ledger.set_bet(500)
    with pytest.raises(InvalidWager):
        ledger.set_bet(0)
    assert ledger.current_bet == 50


def test_snapshot_restores_persisted_fields():
    factory = LedgerFactory()
    ledger = factory.build(balance=4321, history_size=5, last_daily_claim=NOW)
    ledger.owned_cosmetics.add("acc_dice")
    ledger.equipped_accessory = "acc_dice"

    restored = PlayerLedger.from_snapshot(ledger.to_snapshot())

    assert restored.balance == 4321
    assert restored.history == ledger.history
    assert restored.owned_cosmetics == ledger.owned_cosmetics
    assert restored.equipped_accessory == "acc_dice"
    assert restored.last_daily_claim == NOW
    assert restored.last_weekly_claim is None


def test_snapshot_truncates_oversized_history():
    ledger = LedgerFactory().build(history_size=8)
    restored = PlayerLedger.from_snapshot(ledger.to_snapshot(), history_limit=3)
    assert restored.history == ledger.history[:3]


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {"bet": 10},
        {"balance": "lots", "bet": 10},
        {"balance": 100, "bet": 0},
        {"balance": 100, "bet": 10, "history": "oops"},
        {"balance": 100, "bet": 10, "history": [{"id": "x", "game": "POKER"}]},
        {"balance": 100, "bet": 10, "owned_items": [], "active_theme": "theme_pink"},
        {"balance": 100, "bet": 10, "last_daily_claim": "yesterday"},
        {"balance": 100, "bet": 10, "open_stake": 10},
        {"balance": 100, "bet": 10, "open_stake": 0, "open_game": "SLOTS"},
        {"balance": 100, "bet": 10, "open_stake": 10, "open_game": "POKER"},
    ],
)
def test_malformed_snapshot_is_corrupt(payload):
    with pytest.raises(CorruptPersistedState):
        PlayerLedger.from_snapshot(payload)


def test_snapshot_adds_default_theme():
    restored = PlayerLedger.from_snapshot({"balance": 5, "bet": 1, "owned_items": ["acc_fire"]})
    assert restored.owned_cosmetics == {DEFAULT_THEME_ID, "acc_fire"}
    assert restored.equipped_theme == DEFAULT_THEME_ID


def test_snapshot_keeps_open_stake():
    ledger = PlayerLedger(balance=100, current_bet=10)
    ledger.place_wager(25, GameType.BLACKJACK)

    restored = PlayerLedger.from_snapshot(ledger.to_snapshot())

    assert restored.balance == 75
    assert restored.open_stake == 25
    assert restored.open_game is GameType.BLACKJACK


def test_forfeit_open_round_records_a_loss():
    ledger = PlayerLedger(balance=100, current_bet=10)
    assert ledger.forfeit_open_round(now=NOW) is None

    ledger.place_wager(25, GameType.HI_LO)
    entry = ledger.forfeit_open_round(now=NOW)

    assert entry.outcome is Outcome.LOSS
    assert entry.amount == 25
    assert entry.game_type is GameType.HI_LO
    assert ledger.balance == 75
    assert not ledger.has_open_round
    assert ledger.history == [entry]
    assert "forfeited" in ledger.last_event
