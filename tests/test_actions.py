"""Unit tests for the action rule table and interaction choices."""

import pytest
from cabo.engine import (
    ActionKind,
    ActionTable,
    DEFAULT_ACTION_TABLE,
    Discard,
    PerformAction,
    Rank,
    SwapWithOwnCard,
    unlocked_action,
)
from cabo.engine.actions import parse_action_table
from cabo.engine.interactions import legal_interactions


def test_default_action_table() -> None:
    expected = {
        Rank.SEVEN: ActionKind.PEEK,
        Rank.EIGHT: ActionKind.PEEK,
        Rank.NINE: ActionKind.SPY,
        Rank.TEN: ActionKind.SPY,
        Rank.JACK: ActionKind.SWAP,
        Rank.QUEEN: ActionKind.SWAP,
    }
    for rank in Rank:
        assert unlocked_action(rank) == expected.get(rank, ActionKind.NONE)


def test_action_table_is_total() -> None:
    table = ActionTable.from_mapping({Rank.KING: ActionKind.SPY})
    mapping = table.as_dict()
    assert set(mapping) == set(Rank)
    assert mapping[Rank.KING] == ActionKind.SPY
    assert mapping[Rank.SEVEN] == ActionKind.NONE
    assert unlocked_action(Rank.KING, table) == ActionKind.SPY


def test_parse_action_table() -> None:
    table = parse_action_table("7:peek, k:SWAP,,2:spy")
    assert table.lookup(Rank.SEVEN) == ActionKind.PEEK
    assert table.lookup(Rank.KING) == ActionKind.SWAP
    assert table.lookup(Rank.TWO) == ActionKind.SPY
    assert table.lookup(Rank.EIGHT) == ActionKind.NONE


@pytest.mark.parametrize("entry", ["7", "7:fly", "Z:peek"])
def test_parse_action_table_invalid(entry: str) -> None:
    with pytest.raises(ValueError):
        parse_action_table(entry)


def test_legal_interactions() -> None:
    assert legal_interactions(Rank.FIVE) == [Discard(), SwapWithOwnCard()]
    assert legal_interactions(Rank.NINE) == [
        Discard(),
        SwapWithOwnCard(),
        PerformAction(action=ActionKind.SPY),
    ]


def test_swap_progress() -> None:
    swap = PerformAction(action=ActionKind.SWAP)
    assert swap.memorized == 0
    picked = PerformAction(action=ActionKind.SWAP, picks=("a",))
    assert picked.memorized == 1
    assert str(picked) == "swap (1/2)"
