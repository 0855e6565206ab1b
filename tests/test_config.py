"""Unit tests for rule configuration."""

import pytest
from cabo.engine import ActionKind, DEFAULT_ACTION_TABLE, Rank, RuleConfig


def test_defaults():
    rules = RuleConfig()
    assert rules.cards_per_player == 4
    assert rules.regard_cards == 2
    assert (rules.min_players, rules.max_players) == (2, 8)
    assert rules.mismatch_penalty == 0
    assert rules.reshuffle_discard
    assert rules.action_table == DEFAULT_ACTION_TABLE


def test_from_env_empty():
    assert RuleConfig.from_env({}) == RuleConfig()


def test_from_env_overrides():
    rules = RuleConfig.from_env(
        {
            "CABO_CARDS_PER_PLAYER": "6",
            "CABO_REGARD_CARDS": "1",
            "CABO_MAX_PLAYERS": "4",
            "CABO_MISMATCH_PENALTY": "1",
            "CABO_RESHUFFLE_DISCARD": "no",
            "CABO_ACTION_TABLE": "K:spy, 2:peek",
            "UNRELATED": "x",
        }
    )
    assert rules.cards_per_player == 6
    assert rules.regard_cards == 1
    assert rules.max_players == 4
    assert rules.mismatch_penalty == 1
    assert not rules.reshuffle_discard
    assert rules.action_table.lookup(Rank.KING) == ActionKind.SPY
    assert rules.action_table.lookup(Rank.TWO) == ActionKind.PEEK
    assert rules.action_table.lookup(Rank.SEVEN) == ActionKind.NONE


def test_from_env_ignores_blank_values():
    assert RuleConfig.from_env({"CABO_CARDS_PER_PLAYER": " "}) == RuleConfig()


@pytest.mark.parametrize(
    "environ",
    [
        {"CABO_CARDS_PER_PLAYER": "four"},
        {"CABO_CARDS_PER_PLAYER": "0"},
        {"CABO_MIN_PLAYERS": "1"},
        {"CABO_REGARD_CARDS": "-1"},
        {"CABO_MIN_PLAYERS": "5", "CABO_MAX_PLAYERS": "3"},
        {"CABO_MISMATCH_PENALTY": "-1"},
        {"CABO_RESHUFFLE_DISCARD": "maybe"},
        {"CABO_ACTION_TABLE": "7-peek"},
    ],
)
def test_from_env_rejects_invalid_values(environ):
    with pytest.raises(ValueError):
        RuleConfig.from_env(environ)
