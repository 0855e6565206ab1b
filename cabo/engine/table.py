"""Hands, slots and the card ownership index.

Every card in play lives in exactly one container: the draw pile, the
discard pile, a player's hand, or a player's drawn-card slot. ``Table`` keeps
an explicit ``card_id -> Location`` index next to the containers so that
membership checks are a dict lookup, and every operation returns a new
``Table`` instead of mutating the old one.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from cabo.engine.card import Card
from cabo.engine.deck import Pile, PileKind
from cabo.engine.errors import CardNotInSource, IllegalTransition


class Container(str, Enum):
    """Kinds of card containers."""

    DRAW_PILE = "draw_pile"
    DISCARD_PILE = "discard_pile"
    HAND = "hand"
    DRAWN = "drawn"


@dataclass(frozen=True)
class Location:
    """Where a card is. ``player_id`` is set for HAND and DRAWN."""

    container: Container
    player_id: Optional[int] = None

    def __str__(self) -> str:
        if self.player_id is None:
            return self.container.value
        return f"{self.container.value}[{self.player_id}]"


DRAW_PILE = Location(Container.DRAW_PILE)
DISCARD_PILE = Location(Container.DISCARD_PILE)


def in_hand(player_id: int) -> Location:
    return Location(Container.HAND, player_id)


def drawn_by(player_id: int) -> Location:
    return Location(Container.DRAWN, player_id)


@dataclass(frozen=True)
class Slot:
    """A hand position.

    A slot is covered unless ``face_up`` (revealed to everyone during a
    matched-discard attempt) or ``peeked_by`` (revealed to one player during
    a peek or spy) is set.
    """

    card: Card
    face_up: bool = False
    peeked_by: Optional[int] = None

    @property
    def covered(self) -> bool:
        return not self.face_up and self.peeked_by is None

    def visible_to(self, player_id: int) -> bool:
        return self.face_up or self.peeked_by == player_id


@dataclass(frozen=True)
class Hand:
    """One player's cards: covered slots, the drawn card and the pending-match buffer."""

    player_id: int
    slots: Tuple[Slot, ...] = ()
    drawn: Optional[Card] = None
    pending_match: Tuple[str, ...] = ()

    @property
    def cards(self) -> List[Card]:
        return [s.card for s in self.slots]

    def slot_index(self, card_id: str) -> int:
        for i, slot in enumerate(self.slots):
            if slot.card.id == card_id:
                return i
        raise CardNotInSource(f"Card {card_id} is not in player {self.player_id}'s hand")

    def __len__(self) -> int:
        return len(self.slots)


@dataclass(frozen=True)
class Table:
    """Draw pile, discard pile and hands, plus the ownership index."""

    draw_pile: Pile = field(default_factory=lambda: Pile(PileKind.DRAW))
    discard_pile: Pile = field(default_factory=lambda: Pile(PileKind.DISCARD))
    hands: Tuple[Hand, ...] = ()
    index: Dict[str, Location] = field(default_factory=dict, compare=False)

    @classmethod
    def build(
        cls,
        draw_pile: Iterable[Card] = (),
        discard_pile: Iterable[Card] = (),
        hands: Iterable[Hand] = (),
    ) -> "Table":
        """Create a table and its index, rejecting duplicated cards."""
        table = cls(
            draw_pile=Pile(PileKind.DRAW, tuple(draw_pile)),
            discard_pile=Pile(PileKind.DISCARD, tuple(discard_pile)),
            hands=tuple(hands),
        )
        index: Dict[str, Location] = {}
        for card, location in table._walk():
            if card.id in index:
                raise ValueError(f"Card {card.id} appears in {index[card.id]} and {location}")
            index[card.id] = location
        return replace(table, index=index)

    def _walk(self) -> Iterable[Tuple[Card, Location]]:
        for card in self.draw_pile.cards:
            yield card, DRAW_PILE
        for card in self.discard_pile.cards:
            yield card, DISCARD_PILE
        for hand in self.hands:
            for slot in hand.slots:
                yield slot.card, in_hand(hand.player_id)
            if hand.drawn is not None:
                yield hand.drawn, drawn_by(hand.player_id)

    # -- lookups -----------------------------------------------------------

    @property
    def player_ids(self) -> Tuple[int, ...]:
        return tuple(h.player_id for h in self.hands)

    def hand(self, player_id: int) -> Hand:
        return self.hands[self._hand_position(player_id)]

    def _hand_position(self, player_id: Optional[int]) -> int:
        for i, hand in enumerate(self.hands):
            if hand.player_id == player_id:
                return i
        raise IllegalTransition(f"No player {player_id} at the table")

    def locate(self, card_id: str) -> Optional[Location]:
        return self.index.get(card_id)

    def card(self, card_id: str) -> Card:
        for card, _ in self._walk():
            if card.id == card_id:
                return card
        raise CardNotInSource(f"Card {card_id} is not in play")

    def slot(self, card_id: str) -> Slot:
        location = self.locate(card_id)
        if location is None or location.container != Container.HAND:
            raise CardNotInSource(f"Card {card_id} is not in any hand")
        hand = self.hand(location.player_id)
        return hand.slots[hand.slot_index(card_id)]

    def all_cards(self) -> List[Card]:
        """Every card in play, once per container it is found in."""
        return [card for card, _ in self._walk()]

    # -- mutations (all return a new Table) --------------------------------

    def with_hand(self, hand: Hand) -> "Table":
        hands = list(self.hands)
        hands[self._hand_position(hand.player_id)] = hand
        return replace(self, hands=tuple(hands))

    def move(
        self,
        card_id: str,
        source: Location,
        dest: Location,
        slot: Optional[int] = None,
    ) -> "Table":
        """Transfer a card from ``source`` to ``dest``.

        Moving into a hand inserts a covered slot at ``slot`` (default: the
        end). Raises ``CardNotInSource`` if the card is not in ``source``.
        """
        if self.index.get(card_id) != source:
            raise CardNotInSource(f"Card {card_id} is not in {source}")

        table, card = self._take(card_id, source)
        table = table._put(card, dest, slot)

        index = dict(self.index)
        index[card_id] = dest
        return replace(table, index=index)

    def _take(self, card_id: str, source: Location) -> Tuple["Table", Card]:
        if source.container == Container.DRAW_PILE:
            card = next(c for c in self.draw_pile.cards if c.id == card_id)
            cards = tuple(c for c in self.draw_pile.cards if c.id != card_id)
            return replace(self, draw_pile=Pile(PileKind.DRAW, cards)), card
        if source.container == Container.DISCARD_PILE:
            card = next(c for c in self.discard_pile.cards if c.id == card_id)
            cards = tuple(c for c in self.discard_pile.cards if c.id != card_id)
            return replace(self, discard_pile=Pile(PileKind.DISCARD, cards)), card

        hand = self.hand(source.player_id)
        if source.container == Container.DRAWN:
            card = hand.drawn
            return self.with_hand(replace(hand, drawn=None)), card

        i = hand.slot_index(card_id)
        card = hand.slots[i].card
        new_hand = replace(
            hand,
            slots=hand.slots[:i] + hand.slots[i + 1:],
            pending_match=tuple(c for c in hand.pending_match if c != card_id),
        )
        return self.with_hand(new_hand), card

    def _put(self, card: Card, dest: Location, slot: Optional[int]) -> "Table":
        if dest.container == Container.DRAW_PILE:
            return replace(self, draw_pile=Pile(PileKind.DRAW, self.draw_pile.cards + (card,)))
        if dest.container == Container.DISCARD_PILE:
            return replace(
                self, discard_pile=Pile(PileKind.DISCARD, self.discard_pile.cards + (card,))
            )

        hand = self.hand(dest.player_id)
        if dest.container == Container.DRAWN:
            if hand.drawn is not None:
                raise IllegalTransition(
                    f"Player {hand.player_id} already holds a drawn card"
                )
            return self.with_hand(replace(hand, drawn=card))

        position = len(hand.slots) if slot is None else slot
        slots = hand.slots[:position] + (Slot(card),) + hand.slots[position:]
        return self.with_hand(replace(hand, slots=slots))

    def exchange(self, card_a: str, card_b: str) -> "Table":
        """Swap two hand cards between their slots. Both end up covered."""
        loc_a, loc_b = self.locate(card_a), self.locate(card_b)
        for card_id, loc in ((card_a, loc_a), (card_b, loc_b)):
            if loc is None or loc.container != Container.HAND:
                raise CardNotInSource(f"Card {card_id} is not in any hand")

        hand_a = self.hand(loc_a.player_id)
        i = hand_a.slot_index(card_a)
        table = self.with_hand(
            replace(hand_a, slots=_set_slot(hand_a.slots, i, Slot(self.card(card_b))))
        )
        hand_b = table.hand(loc_b.player_id)
        j = hand_b.slot_index(card_b)
        table = table.with_hand(
            replace(hand_b, slots=_set_slot(hand_b.slots, j, Slot(self.card(card_a))))
        )

        index = dict(self.index)
        index[card_a], index[card_b] = loc_b, loc_a
        return replace(table, index=index)

    def update_slot(self, card_id: str, **changes) -> "Table":
        """Change the reveal flags of the slot holding ``card_id``."""
        location = self.locate(card_id)
        if location is None or location.container != Container.HAND:
            raise CardNotInSource(f"Card {card_id} is not in any hand")
        hand = self.hand(location.player_id)
        i = hand.slot_index(card_id)
        slots = _set_slot(hand.slots, i, replace(hand.slots[i], **changes))
        return self.with_hand(replace(hand, slots=slots))

    def cover(self, card_ids: Iterable[str]) -> "Table":
        table = self
        for card_id in card_ids:
            table = table.update_slot(card_id, face_up=False, peeked_by=None)
        return table

    def set_pending_match(self, player_id: int, card_ids: Tuple[str, ...]) -> "Table":
        hand = self.hand(player_id)
        return self.with_hand(replace(hand, pending_match=card_ids))

    def with_draw_pile(self, cards: Iterable[Card]) -> "Table":
        """Replace the draw pile contents with cards taken from the discard pile."""
        cards = tuple(cards)
        index = dict(self.index)
        for card in cards:
            if index.get(card.id) != DISCARD_PILE:
                raise CardNotInSource(f"Card {card.id} is not in {DISCARD_PILE}")
            index[card.id] = DRAW_PILE
        ids = {c.id for c in cards}
        return replace(
            self,
            draw_pile=Pile(PileKind.DRAW, self.draw_pile.cards + cards),
            discard_pile=Pile(
                PileKind.DISCARD, tuple(c for c in self.discard_pile.cards if c.id not in ids)
            ),
            index=index,
        )


def _set_slot(slots: Tuple[Slot, ...], i: int, slot: Slot) -> Tuple[Slot, ...]:
    return slots[:i] + (slot,) + slots[i + 1:]
