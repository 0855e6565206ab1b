"""Unit tests for game history logging."""

from cabo.engine import (
    DrawCard,
    Discard,
    PileKind,
    RegisterPlayer,
    SelectInteraction,
    TapTarget,
    apply_intent,
    new_game,
)
from cabo.engine.intents import AssetsLoaded, DrawPilePlaced

from helpers import in_game_state, play


def test_history_initialization():
    state = new_game(seed=1)
    assert state.history == ()
    assert state.version == 0


def test_history_records_registration():
    state = play(new_game(seed=1), AssetsLoaded(), DrawPilePlaced(), RegisterPlayer(name="Alice"))
    state = apply_intent(state, RegisterPlayer())
    assert state.history == ("Alice joined", "Player 1 joined")


def test_history_hides_cards_drawn_from_draw_pile():
    state = in_game_state({0: ["2S"], 1: ["3S"]}, draw=["QD"], discard=["9D"])
    state = apply_intent(state, DrawCard())
    assert state.history[-1] == "Player 0 drew a card from the draw pile"

    state = in_game_state({0: ["2S"], 1: ["3S"]}, draw=["QD"], discard=["9D"])
    state = apply_intent(state, DrawCard(pile=PileKind.DISCARD))
    assert state.history[-1] == "Player 0 drew a card from the discard pile (9D)"


def test_history_records_matched_discard():
    state = in_game_state({0: ["7H", "2S"], 1: ["3S"]}, draw=["7D"], discard=["9D"])
    state = play(state, DrawCard(), SelectInteraction(Discard()), TapTarget("7H"))
    assert state.history[-1] == "Player 0 turned up 7H"

    state = apply_intent(state, TapTarget("7D"))
    assert state.history[-2:] == ("Player 0 matched 7H with 7D", "Player 0 discarded 7D")


def test_history_persists_across_turns():
    state = in_game_state({0: ["2S"], 1: ["3S"]}, draw=["4D", "QD"], discard=["9D"])
    for _ in range(2):
        state = play(state, DrawCard(), SelectInteraction(Discard()))
        state = apply_intent(state, TapTarget(state.drawn_card.id))
    assert state.history == (
        "Player 0 drew a card from the draw pile",
        "Player 0 discarded QD",
        "Player 1 drew a card from the draw pile",
        "Player 1 discarded 4D",
    )
