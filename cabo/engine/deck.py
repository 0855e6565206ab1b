"""Deck creation, shuffling and piles."""

import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from cabo.engine.card import Card, Rank, Suit
from cabo.engine.errors import InsufficientCards


class PileKind(str, Enum):
    """The two shared piles on the table."""

    DRAW = "draw"
    DISCARD = "discard"


def derive_rng(*parts: object) -> random.Random:
    """A generator seeded from ``parts``, so transitions stay reproducible."""
    return random.Random(":".join(str(p) for p in parts))


def create_deck(seed: int | str | None = None) -> List[Card]:
    """Create a standard 52-card deck.

    - 4 suits × (A, 2-10, J, Q, K)
    - Shuffled; a seed makes the order reproducible.
    - Ids are handed out after the shuffle so they say nothing about the rank.
    """
    faces = [(rank, suit) for suit in Suit for rank in Rank]

    if seed is not None:
        rng = random.Random(seed)
        rng.shuffle(faces)
    else:
        random.shuffle(faces)

    return [Card(id=f"c{i:02d}", rank=rank, suit=suit) for i, (rank, suit) in enumerate(faces)]


@dataclass(frozen=True)
class Pile:
    """An ordered, immutable pile of cards. Top is last."""

    kind: PileKind
    cards: Tuple[Card, ...] = ()

    def top(self) -> Optional[Card]:
        """Return the top card, if any."""
        return self.cards[-1] if self.cards else None

    def __len__(self) -> int:
        return len(self.cards)

    def __contains__(self, card_id: object) -> bool:
        return any(c.id == card_id for c in self.cards)


def deal(pile: Pile, n: int) -> Tuple[Pile, List[Card]]:
    """Remove the top ``n`` cards from ``pile``.

    Returns the shortened pile and the dealt cards, topmost first.
    """
    if n < 0:
        raise ValueError(f"Cannot deal a negative number of cards: {n}")
    if len(pile) < n:
        raise InsufficientCards(
            f"{pile.kind.value} pile holds {len(pile)} cards, {n} requested"
        )
    if n == 0:
        return pile, []
    dealt = list(reversed(pile.cards[-n:]))
    return Pile(kind=pile.kind, cards=pile.cards[:-n]), dealt
