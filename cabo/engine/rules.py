"""Cabo rules: the turn and phase state machine.

``apply_intent`` is a pure function from (state, intent) to the next state.
An intent that matches no edge from the current stage raises an
``EngineError`` and leaves the input state untouched; since states are
immutable there is never a partial update to roll back.
"""

import logging
import random
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Type

from cabo.engine.config import RuleConfig
from cabo.engine.deck import Pile, PileKind, create_deck, deal, derive_rng
from cabo.engine.errors import (
    EngineError,
    IllegalTransition,
    InsufficientCards,
    InvalidPlayerCount,
)
from cabo.engine.game_state import GameState, Phase, Stage
from cabo.engine.intents import (
    AssetsLoaded,
    CallLastRound,
    DealingComplete,
    DrawCard,
    DrawPilePlaced,
    EndReveal,
    Intent,
    RegisterPlayer,
    Reset,
    SelectInteraction,
    StartDeal,
    TapTarget,
    Undo,
    UnregisterPlayer,
)
from cabo.engine.interactions import legal_interactions
from cabo.engine.resolver import refill_draw_pile, resolve_end_reveal, resolve_tap, rollback
from cabo.engine.scoring import format_results, rank_results, score_table
from cabo.engine.table import DISCARD_PILE, DRAW_PILE, Hand, Slot, Table, drawn_by

logger = logging.getLogger(__name__)

Handler = Callable[[GameState, Intent], GameState]


def new_game(rules: Optional[RuleConfig] = None, seed: Optional[int] = None) -> GameState:
    """Create the initial state: pre-game, loading assets."""
    if seed is None:
        seed = random.randrange(2**32)
    return GameState(rules=rules or RuleConfig(), seed=seed)


def next_player(order: Sequence[int], player_id: int) -> int:
    """The player after ``player_id`` in table order, wrapping to the first."""
    idx = order.index(player_id)
    return order[(idx + 1) % len(order)]


def apply_intent(state: GameState, intent: Intent) -> GameState:
    """Apply an intent and return the new game state."""
    handler = _HANDLERS.get((state.stage, type(intent)))
    if handler is None:
        raise IllegalTransition(
            f"{type(intent).__name__} is not allowed in {state.stage.value}"
        )
    return handler(state, intent)


def get_legal_intents(state: GameState) -> List[Intent]:
    """Return every intent the current state accepts."""
    return [intent for intent in _candidate_intents(state) if _accepts(state, intent)]


def _accepts(state: GameState, intent: Intent) -> bool:
    try:
        apply_intent(state, intent)
    except EngineError:
        return False
    return True


def _candidate_intents(state: GameState) -> Iterable[Intent]:
    stage = state.stage
    if stage == Stage.LOADING_ASSETS:
        yield AssetsLoaded()
    elif stage == Stage.PLACE_DRAW_PILE:
        yield DrawPilePlaced()
    elif stage == Stage.SET_PLAYER_POSITIONS:
        yield RegisterPlayer()
        for pid in state.players:
            yield UnregisterPlayer(player_id=pid)
        yield StartDeal()
    elif stage == Stage.REGARD_CARDS:
        yield StartDeal()
    elif stage == Stage.DEALING_CARDS:
        yield DealingComplete()
    elif stage == Stage.CURRENT_TURN:
        yield DrawCard(pile=PileKind.DRAW)
        yield DrawCard(pile=PileKind.DISCARD)
    elif stage == Stage.WAIT_FOR_INTERACTION_TYPE_SELECTION:
        for interaction in legal_interactions(state.drawn_value, state.rules.action_table):
            yield SelectInteraction(interaction=interaction)
    elif stage == Stage.SELECTED_INTERACTION_TYPE:
        drawn = state.drawn_card
        if drawn is not None:
            yield TapTarget(card_id=drawn.id)
        for hand in state.table.hands:
            for slot in hand.slots:
                yield TapTarget(card_id=slot.card.id)
        yield EndReveal()
        yield Undo()
    elif stage == Stage.GAME_OVER:
        yield Reset()

    if stage.phase == Phase.IN_GAME and state.last_round_caller is None:
        yield CallLastRound()


def _commit(state: GameState, events: Iterable[str] = (), **changes) -> GameState:
    """Build the successor state: one version later, events appended."""
    events = tuple(events)
    new_state = replace(
        state,
        version=state.version + 1,
        history=state.history + events,
        **changes,
    )
    logger.debug(
        "v%d %s -> %s%s",
        new_state.version,
        state.stage.value,
        new_state.stage.value,
        f" ({'; '.join(events)})" if events else "",
    )
    return new_state


# -- pre-game ----------------------------------------------------------------


def _assets_loaded(state: GameState, intent: AssetsLoaded) -> GameState:
    return _commit(state, stage=Stage.PLACE_DRAW_PILE)


def _draw_pile_placed(state: GameState, intent: DrawPilePlaced) -> GameState:
    return _commit(state, stage=Stage.SET_PLAYER_POSITIONS)


def _register_player(state: GameState, intent: RegisterPlayer) -> GameState:
    pid = state.next_player_id
    names = dict(state.names)
    if intent.name:
        names[pid] = intent.name
    return _commit(
        state,
        [f"{intent.name or f'Player {pid}'} joined"],
        players=state.players + (pid,),
        names=names,
        next_player_id=pid + 1,
    )


def _unregister_player(state: GameState, intent: UnregisterPlayer) -> GameState:
    if intent.player_id not in state.players:
        raise IllegalTransition(f"No player {intent.player_id} at the table")
    names = {pid: name for pid, name in state.names.items() if pid != intent.player_id}
    return _commit(
        state,
        [f"{state.player_name(intent.player_id)} left"],
        players=tuple(p for p in state.players if p != intent.player_id),
        names=names,
    )


def _confirm_players(state: GameState, intent: StartDeal) -> GameState:
    count = len(state.players)
    rules = state.rules
    if not rules.min_players <= count <= rules.max_players:
        raise InvalidPlayerCount(
            f"{count} players registered, {rules.min_players}-{rules.max_players} required"
        )
    return _commit(state, stage=Stage.REGARD_CARDS)


def _deal_round(state: GameState, intent: StartDeal) -> GameState:
    """Shuffle, deal ``cards_per_player`` to everyone and flip one to the discard pile."""
    per_player = state.rules.cards_per_player
    deck = create_deck(seed=f"{state.seed}:{state.round_number}:deck")
    pile = Pile(PileKind.DRAW, tuple(deck))
    needed = per_player * len(state.players) + 1
    if len(pile) < needed:
        raise InsufficientCards(f"Dealing needs {needed} cards, the deck holds {len(pile)}")

    # each owner gets a private look at their first slots until DealingComplete
    regard = min(state.rules.regard_cards, per_player)
    slots: Dict[int, List[Slot]] = {pid: [] for pid in state.players}
    for i in range(per_player):
        for pid in state.players:
            pile, (card,) = deal(pile, 1)
            slots[pid].append(Slot(card, peeked_by=pid if i < regard else None))
    pile, (first_discard,) = deal(pile, 1)

    table = Table.build(
        draw_pile=pile.cards,
        discard_pile=[first_discard],
        hands=[Hand(player_id=pid, slots=tuple(slots[pid])) for pid in state.players],
    )
    logger.info(
        "Round %d dealt: %d players, %d cards each, %s face up",
        state.round_number,
        len(state.players),
        per_player,
        first_discard,
    )
    return _commit(
        state,
        [
            f"Dealt {per_player} cards to {len(state.players)} players, {first_discard} turned up",
            f"Everyone looks at {regard} of their cards",
        ],
        stage=Stage.DEALING_CARDS,
        table=table,
    )


# -- in-game -----------------------------------------------------------------


def _dealing_complete(state: GameState, intent: DealingComplete) -> GameState:
    first = derive_rng(state.seed, state.round_number, "first").choice(state.players)
    table = state.table.cover(card.id for hand in state.table.hands for card in hand.cards)
    return _commit(
        state,
        [f"{state.player_name(first)} starts"],
        stage=Stage.CURRENT_TURN,
        table=table,
        current_player=first,
    )


def _draw_card(state: GameState, intent: DrawCard) -> GameState:
    try:
        pile = PileKind(intent.pile)
    except (ValueError, TypeError):
        raise IllegalTransition(f"Unknown pile {intent.pile!r}") from None

    actor = state.current_player
    table = state.table
    if pile == PileKind.DRAW:
        table = refill_draw_pile(state, table)
        card, source = table.draw_pile.top(), DRAW_PILE
    else:
        card, source = table.discard_pile.top(), DISCARD_PILE
        if card is None:
            raise InsufficientCards("The discard pile is empty")

    table = table.move(card.id, source, drawn_by(actor))
    event = f"{state.player_name(actor)} drew a card from the {pile.value} pile"
    if pile == PileKind.DISCARD:
        event += f" ({card})"
    return _commit(
        state,
        [event],
        stage=Stage.WAIT_FOR_INTERACTION_TYPE_SELECTION,
        table=table,
    )


def _select_interaction(state: GameState, intent: SelectInteraction) -> GameState:
    allowed = legal_interactions(state.drawn_value, state.rules.action_table)
    if intent.interaction not in allowed:
        raise IllegalTransition(
            f"{intent.interaction} is not available for a drawn {state.drawn_card}"
        )
    return _commit(
        state,
        stage=Stage.SELECTED_INTERACTION_TYPE,
        selection=intent.interaction,
    )


def _undo(state: GameState, intent: Undo) -> GameState:
    return _commit(
        state,
        stage=Stage.WAIT_FOR_INTERACTION_TYPE_SELECTION,
        selection=None,
        table=rollback(state),
    )


def _tap_target(state: GameState, intent: TapTarget) -> GameState:
    if not isinstance(intent.card_id, str):
        raise IllegalTransition(f"Card ids are strings, got {intent.card_id!r}")
    resolution = resolve_tap(state, intent.card_id)
    if resolution.turn_complete:
        return _end_turn(state, resolution.table, resolution.events)
    return _commit(
        state,
        resolution.events,
        table=resolution.table,
        selection=resolution.selection,
    )


def _end_reveal(state: GameState, intent: EndReveal) -> GameState:
    resolution = resolve_end_reveal(state)
    return _end_turn(state, resolution.table, resolution.events)


def _end_turn(state: GameState, table: Table, events: Tuple[str, ...]) -> GameState:
    """Pass the turn on, or end the game when it comes back to the last-round caller."""
    upcoming = next_player(state.players, state.current_player)
    if state.last_round_caller is not None and upcoming == state.last_round_caller:
        results = tuple(rank_results(score_table(table, state.players)))
        summary = format_results(results, {pid: state.player_name(pid) for pid in state.players})
        logger.info("Game over after round %d: %s", state.round_number, summary.splitlines()[0])
        return _commit(
            state,
            events + (summary.splitlines()[0],),
            stage=Stage.GAME_OVER,
            table=table,
            current_player=None,
            selection=None,
            results=results,
        )
    return _commit(
        state,
        events,
        stage=Stage.CURRENT_TURN,
        table=table,
        current_player=upcoming,
        selection=None,
    )


def _call_last_round(state: GameState, intent: CallLastRound) -> GameState:
    if state.last_round_caller is not None:
        return state
    logger.info("%s called the last round", state.player_name(state.current_player))
    return _commit(
        state,
        [f"{state.player_name(state.current_player)} called the last round"],
        last_round_caller=state.current_player,
    )


# -- post-game ---------------------------------------------------------------


def _reset(state: GameState, intent: Reset) -> GameState:
    """Start over with a fresh event log; only the version keeps counting."""
    return _commit(
        replace(state, history=()),
        ["New game"],
        stage=Stage.PLACE_DRAW_PILE,
        players=(),
        names={},
        next_player_id=0,
        table=Table(),
        current_player=None,
        selection=None,
        last_round_caller=None,
        results=(),
        round_number=state.round_number + 1,
    )


_HANDLERS: Dict[Tuple[Stage, Type], Handler] = {
    (Stage.LOADING_ASSETS, AssetsLoaded): _assets_loaded,
    (Stage.PLACE_DRAW_PILE, DrawPilePlaced): _draw_pile_placed,
    (Stage.SET_PLAYER_POSITIONS, RegisterPlayer): _register_player,
    (Stage.SET_PLAYER_POSITIONS, UnregisterPlayer): _unregister_player,
    (Stage.SET_PLAYER_POSITIONS, StartDeal): _confirm_players,
    (Stage.REGARD_CARDS, StartDeal): _deal_round,
    (Stage.DEALING_CARDS, DealingComplete): _dealing_complete,
    (Stage.CURRENT_TURN, DrawCard): _draw_card,
    (Stage.WAIT_FOR_INTERACTION_TYPE_SELECTION, SelectInteraction): _select_interaction,
    (Stage.SELECTED_INTERACTION_TYPE, Undo): _undo,
    (Stage.SELECTED_INTERACTION_TYPE, TapTarget): _tap_target,
    (Stage.SELECTED_INTERACTION_TYPE, EndReveal): _end_reveal,
    (Stage.CURRENT_TURN, CallLastRound): _call_last_round,
    (Stage.WAIT_FOR_INTERACTION_TYPE_SELECTION, CallLastRound): _call_last_round,
    (Stage.SELECTED_INTERACTION_TYPE, CallLastRound): _call_last_round,
    (Stage.GAME_OVER, Reset): _reset,
}
