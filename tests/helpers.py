"""Shared builders for engine tests."""

from typing import Dict, Iterable, List, Optional

from cabo.engine import (
    Card,
    GameState,
    Hand,
    RuleConfig,
    Slot,
    Stage,
    Table,
    apply_intent,
)


def card(label: str) -> Card:
    """A card whose id is its label, e.g. "7H"."""
    return Card.from_label(label)


def in_game_state(
    hands: Dict[int, List[str]],
    draw: Iterable[str] = (),
    discard: Iterable[str] = (),
    current: int = 0,
    rules: Optional[RuleConfig] = None,
    last_round_caller: Optional[int] = None,
) -> GameState:
    """A state at the start of ``current``'s turn. Draw pile top is the last label."""
    table = Table.build(
        draw_pile=[card(label) for label in draw],
        discard_pile=[card(label) for label in discard],
        hands=[
            Hand(player_id=pid, slots=tuple(Slot(card(label)) for label in labels))
            for pid, labels in hands.items()
        ],
    )
    return GameState(
        stage=Stage.CURRENT_TURN,
        players=tuple(hands),
        next_player_id=len(hands),
        table=table,
        current_player=current,
        last_round_caller=last_round_caller,
        rules=rules or RuleConfig(),
        seed=7,
    )


def play(state: GameState, *intents) -> GameState:
    for intent in intents:
        state = apply_intent(state, intent)
    return state


def labels(cards: Iterable[Card]) -> List[str]:
    return [c.label for c in cards]


def card_ids(state: GameState) -> List[str]:
    return sorted(c.id for c in state.table.all_cards())
