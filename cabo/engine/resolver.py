"""Interaction resolution: what each tap does to hands and piles.

The functions here take the current ``GameState`` and return a
``Resolution`` describing the new table, the updated interaction progress
and whether the turn is over. They never touch turn order; the state
machine in ``rules`` decides what happens next.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Tuple

from cabo.engine.actions import ActionKind
from cabo.engine.card import Card
from cabo.engine.deck import derive_rng
from cabo.engine.errors import CardNotInSource, IllegalTransition, InsufficientCards
from cabo.engine.game_state import GameState
from cabo.engine.interactions import Discard, Interaction, PerformAction, SwapWithOwnCard
from cabo.engine.table import (
    DISCARD_PILE,
    DRAW_PILE,
    Container,
    Location,
    Table,
    drawn_by,
    in_hand,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Outcome of one resolver step."""

    table: Table
    selection: Interaction
    turn_complete: bool
    events: Tuple[str, ...] = ()


def resolve_tap(state: GameState, card_id: str) -> Resolution:
    """Apply a tap on ``card_id`` to the selected interaction."""
    selection = state.selection
    if isinstance(selection, Discard):
        return _tap_discard(state, card_id)
    if isinstance(selection, SwapWithOwnCard):
        return _tap_swap_with_own(state, card_id)
    if isinstance(selection, PerformAction):
        if selection.action in (ActionKind.PEEK, ActionKind.SPY):
            return _tap_reveal(state, selection, card_id)
        if selection.action == ActionKind.SWAP:
            return _tap_swap_with_opponent(state, selection, card_id)
    raise IllegalTransition(f"No interaction accepts a tap in {state.stage.value}")


def resolve_end_reveal(state: GameState) -> Resolution:
    """Cover the peeked/spied card again and discard the drawn card."""
    selection = state.selection
    if (
        not isinstance(selection, PerformAction)
        or selection.action not in (ActionKind.PEEK, ActionKind.SPY)
        or selection.revealed is None
    ):
        raise IllegalTransition("Nothing is being revealed")

    table = state.table.cover([selection.revealed])
    table, drawn = _discard_drawn(table, state.current_player)
    return Resolution(
        table=table,
        selection=selection,
        turn_complete=True,
        events=(f"{_name(state)} discarded {drawn}",),
    )


def rollback(state: GameState) -> Table:
    """Undo all partial progress of the selected interaction.

    Buffered matched-discard cards are covered again and the buffer is
    cleared; partial swap picks are simply dropped with the selection.
    """
    selection = state.selection
    if isinstance(selection, PerformAction) and selection.revealed is not None:
        raise IllegalTransition("A revealed card cannot be taken back")

    actor = state.current_player
    table = state.table
    pending = table.hand(actor).pending_match
    if pending:
        table = table.cover(pending).set_pending_match(actor, ())
    return table


# -- discard ---------------------------------------------------------------


def _tap_discard(state: GameState, card_id: str) -> Resolution:
    actor = state.current_player
    table = state.table
    drawn = table.hand(actor).drawn

    if drawn is not None and card_id == drawn.id:
        return _resolve_discard(state, drawn)

    _require_covered_hand_card(table, card_id)
    pending = table.hand(actor).pending_match
    table = table.update_slot(card_id, face_up=True)
    table = table.set_pending_match(actor, pending + (card_id,))
    card = table.card(card_id)
    return Resolution(
        table=table,
        selection=state.selection,
        turn_complete=False,
        events=(f"{_name(state)} turned up {card}",),
    )


def _resolve_discard(state: GameState, drawn: Card) -> Resolution:
    actor = state.current_player
    table = state.table
    pending = table.hand(actor).pending_match
    buffered = [table.card(c) for c in pending]
    events: List[str] = []

    if all(card.rank == drawn.rank for card in buffered):
        for card in buffered:
            table = table.move(card.id, table.locate(card.id), DISCARD_PILE)
        if buffered:
            events.append(
                f"{_name(state)} matched {', '.join(str(c) for c in buffered)} with {drawn}"
            )
    else:
        table = table.cover(pending)
        events.append(
            f"{_name(state)} failed to match {', '.join(str(c) for c in buffered)} with {drawn}"
        )
        table, drawn_count = _draw_penalty(state, table, state.rules.mismatch_penalty)
        if drawn_count:
            events.append(f"{_name(state)} drew {drawn_count} penalty cards")

    table = table.set_pending_match(actor, ())
    table, _ = _discard_drawn(table, actor)
    events.append(f"{_name(state)} discarded {drawn}")
    return Resolution(
        table=table, selection=state.selection, turn_complete=True, events=tuple(events)
    )


def _draw_penalty(state: GameState, table: Table, count: int) -> Tuple[Table, int]:
    drawn = 0
    for _ in range(count):
        try:
            table = refill_draw_pile(state, table)
        except InsufficientCards:
            logger.info("Draw pile exhausted after %d of %d penalty cards", drawn, count)
            break
        top = table.draw_pile.top()
        table = table.move(top.id, DRAW_PILE, in_hand(state.current_player))
        drawn += 1
    return table, drawn


# -- swap with own card ------------------------------------------------------


def _tap_swap_with_own(state: GameState, card_id: str) -> Resolution:
    actor = state.current_player
    table = state.table
    if table.locate(card_id) != in_hand(actor):
        raise CardNotInSource(f"Card {card_id} is not in {_name(state)}'s hand")

    drawn = table.hand(actor).drawn
    position = table.hand(actor).slot_index(card_id)
    # drawn card takes the tapped card's slot, the tapped card becomes drawn
    table = table.move(drawn.id, drawn_by(actor), in_hand(actor), slot=position)
    table = table.move(card_id, in_hand(actor), drawn_by(actor))
    table, replaced = _discard_drawn(table, actor)
    return Resolution(
        table=table,
        selection=state.selection,
        turn_complete=True,
        events=(f"{_name(state)} swapped the drawn card in and discarded {replaced}",),
    )


# -- peek / spy --------------------------------------------------------------


def _tap_reveal(state: GameState, selection: PerformAction, card_id: str) -> Resolution:
    actor = state.current_player
    if selection.revealed is not None:
        raise IllegalTransition(f"Card {selection.revealed} is already revealed")

    location = _require_covered_hand_card(state.table, card_id)
    own = location.player_id == actor
    if selection.action == ActionKind.PEEK and not own:
        raise IllegalTransition("Peek targets one of your own cards")
    if selection.action == ActionKind.SPY and own:
        raise IllegalTransition("Spy targets another player's card")

    table = state.table.update_slot(card_id, peeked_by=actor)
    return Resolution(
        table=table,
        selection=replace(selection, revealed=card_id),
        turn_complete=False,
        events=(f"{_name(state)} looked at a card of {state.player_name(location.player_id)}",),
    )


# -- swap with opponent --------------------------------------------------------


def _tap_swap_with_opponent(
    state: GameState, selection: PerformAction, card_id: str
) -> Resolution:
    actor = state.current_player
    table = state.table
    if card_id in selection.picks:
        raise IllegalTransition(f"Card {card_id} is already picked")

    location = _require_covered_hand_card(table, card_id)
    own = location.player_id == actor
    for picked in selection.picks:
        if (table.locate(picked).player_id == actor) == own:
            side = "own" if own else "opponent"
            raise IllegalTransition(f"An {side} card is already picked")

    picks = selection.picks + (card_id,)
    if len(picks) < 2:
        return Resolution(
            table=table,
            selection=replace(selection, picks=picks),
            turn_complete=False,
        )

    table = table.exchange(picks[0], picks[1])
    table, drawn = _discard_drawn(table, actor)
    owners = [state.table.locate(c).player_id for c in picks]
    other = next(pid for pid in owners if pid != actor)
    return Resolution(
        table=table,
        selection=replace(selection, picks=picks),
        turn_complete=True,
        events=(
            f"{_name(state)} swapped a card with {state.player_name(other)}",
            f"{_name(state)} discarded {drawn}",
        ),
    )


# -- helpers ---------------------------------------------------------------


def refill_draw_pile(state: GameState, table: Table) -> Table:
    """Make sure the draw pile holds a card.

    An empty draw pile is refilled from the discard pile, minus its top
    card, when the rules allow it.
    """
    if len(table.draw_pile):
        return table
    reusable = list(table.discard_pile.cards[:-1])
    if not state.rules.reshuffle_discard or not reusable:
        raise InsufficientCards("The draw pile is empty")
    derive_rng(state.seed, state.round_number, state.version, "reshuffle").shuffle(reusable)
    logger.info("Reshuffling %d discarded cards into the draw pile", len(reusable))
    return table.with_draw_pile(reusable)


def _discard_drawn(table: Table, actor: int) -> Tuple[Table, Card]:
    drawn = table.hand(actor).drawn
    if drawn is None:
        raise IllegalTransition("No drawn card to discard")
    return table.move(drawn.id, drawn_by(actor), DISCARD_PILE), drawn


def _require_covered_hand_card(table: Table, card_id: str) -> Location:
    location = table.locate(card_id)
    if location is None or location.container != Container.HAND:
        raise CardNotInSource(f"Card {card_id} is not in any hand")
    if not table.slot(card_id).covered:
        raise IllegalTransition(f"Card {card_id} is not covered")
    return location


def _name(state: GameState) -> str:
    return state.player_name(state.current_player)
