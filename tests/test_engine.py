"""Unit tests for the engine facade."""

import logging

import pytest
from cabo.engine import (
    AssetsLoaded,
    CallLastRound,
    DealingComplete,
    Discard,
    DrawCard,
    DrawPilePlaced,
    Engine,
    IllegalTransition,
    InvalidPlayerCount,
    RegisterPlayer,
    Reset,
    SelectInteraction,
    Stage,
    StartDeal,
    TapTarget,
)


def _in_game_engine(players: int = 2) -> Engine:
    engine = Engine(seed=5)
    for intent in (AssetsLoaded(), DrawPilePlaced(), *[RegisterPlayer() for _ in range(players)]):
        assert engine.apply_intent(intent).ok
    for intent in (StartDeal(), StartDeal(), DealingComplete()):
        assert engine.apply_intent(intent).ok
    return engine


def test_initial_state():
    engine = Engine(seed=5)
    state = engine.current_state()
    assert state.stage == Stage.LOADING_ASSETS
    assert state.seed == 5
    assert engine.history() == (state,)
    assert engine.legal_intents() == [AssetsLoaded()]


def test_errors_are_returned():
    engine = Engine(seed=5)
    before = engine.current_state()
    result = engine.apply_intent(TapTarget("c01"))
    assert not result.ok
    assert isinstance(result.error, IllegalTransition)
    assert result.state is before
    assert engine.current_state() is before


def test_invalid_player_count_is_returned():
    engine = Engine(seed=5)
    engine.apply_intent(AssetsLoaded())
    engine.apply_intent(DrawPilePlaced())
    engine.apply_intent(RegisterPlayer())
    result = engine.apply_intent(StartDeal())
    assert isinstance(result.error, InvalidPlayerCount)
    assert engine.current_state().stage == Stage.SET_PLAYER_POSITIONS


def test_subscribers_see_every_new_state():
    engine = Engine(seed=5)
    seen = []
    engine.subscribe(seen.append)

    result = engine.apply_intent(AssetsLoaded())
    engine.apply_intent(TapTarget("c01"))
    engine.apply_intent(DrawPilePlaced())

    assert [s.stage for s in seen] == [Stage.PLACE_DRAW_PILE, Stage.SET_PLAYER_POSITIONS]
    assert seen[0] is result.state
    assert [s.version for s in seen] == [1, 2]
    assert engine.history() == (engine.history()[0], *seen)


def test_unsubscribe():
    engine = Engine(seed=5)
    seen = []
    unsubscribe = engine.subscribe(seen.append)
    engine.apply_intent(AssetsLoaded())
    unsubscribe()
    unsubscribe()
    engine.apply_intent(DrawPilePlaced())
    assert len(seen) == 1


def test_intents_from_subscribers_are_rejected():
    engine = Engine(seed=5)
    nested = []

    def handler(state):
        nested.append(engine.apply_intent(DrawPilePlaced()))

    engine.subscribe(handler)
    engine.apply_intent(AssetsLoaded())

    assert len(nested) == 1
    assert isinstance(nested[0].error, IllegalTransition)
    assert engine.current_state().stage == Stage.PLACE_DRAW_PILE

    # the flag is cleared once notification is over
    assert engine.apply_intent(DrawPilePlaced()).ok


def test_repeated_last_round_call_publishes_nothing():
    engine = _in_game_engine()
    seen = []
    engine.subscribe(seen.append)

    first = engine.apply_intent(CallLastRound())
    second = engine.apply_intent(CallLastRound())

    assert first.ok and second.ok
    assert second.state is first.state
    assert len(seen) == 1
    assert engine.current_state().last_round_caller == first.state.current_player
    assert CallLastRound() not in engine.legal_intents()


@pytest.mark.parametrize(
    "intent",
    [DrawCard(pile="bogus"), DrawCard(pile=None), TapTarget(card_id=["c01"])],
)
def test_malformed_intents_are_returned_as_errors(intent):
    engine = _in_game_engine()
    engine.apply_intent(DrawCard())
    engine.apply_intent(SelectInteraction(Discard()))
    if isinstance(intent, DrawCard):
        engine.apply_intent(TapTarget(engine.current_state().drawn_card.id))
    before = engine.current_state()

    result = engine.apply_intent(intent)

    assert isinstance(result.error, IllegalTransition)
    assert result.state is before
    assert engine.current_state() is before


def test_failing_subscriber_does_not_undo_the_transition(caplog):
    engine = Engine(seed=5)
    seen = []

    def broken(state):
        raise RuntimeError("boom")

    engine.subscribe(broken)
    engine.subscribe(seen.append)

    with caplog.at_level(logging.ERROR, logger="cabo.engine.engine"):
        result = engine.apply_intent(AssetsLoaded())

    assert result.ok
    assert engine.current_state().stage == Stage.PLACE_DRAW_PILE
    assert seen == [result.state]
    assert "Error in state subscriber" in caplog.text
    assert engine.apply_intent(DrawPilePlaced()).ok


def test_reset_starts_a_fresh_history():
    engine = _in_game_engine()
    engine.apply_intent(CallLastRound())
    while engine.current_state().stage != Stage.GAME_OVER:
        engine.apply_intent(DrawCard())
        engine.apply_intent(SelectInteraction(Discard()))
        engine.apply_intent(TapTarget(engine.current_state().drawn_card.id))
    finished = engine.current_state()
    assert len(engine.history()) > 10

    result = engine.apply_intent(Reset())

    assert engine.history() == (result.state,)
    assert result.state.history == ("New game",)
    assert result.state.version == finished.version + 1
