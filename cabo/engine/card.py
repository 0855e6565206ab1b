"""Card, Rank and Suit types for Cabo."""

from dataclasses import dataclass
from enum import Enum


class Rank(str, Enum):
    """Card ranks."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"


class Suit(str, Enum):
    """Card suits. Only used to tell otherwise equal ranks apart."""

    SPADES = "S"
    HEARTS = "H"
    DIAMONDS = "D"
    CLUBS = "C"


FACE_POINTS = {
    Rank.ACE: 0,
    Rank.JACK: 11,
    Rank.QUEEN: 12,
    Rank.KING: 13,
}


def rank_to_points(rank: Rank) -> int:
    """Point value of a rank: Ace=0, numerals face value, J=11, Q=12, K=13."""
    if rank in FACE_POINTS:
        return FACE_POINTS[rank]
    return int(rank.value)


@dataclass(frozen=True)
class Card:
    """A playing card.

    ``id`` is opaque so it can be shown for covered cards without giving
    the rank away. ``label`` is the face, e.g. "10H" or "QS".
    """

    id: str
    rank: Rank
    suit: Suit

    @property
    def label(self) -> str:
        return f"{self.rank.value}{self.suit.value}"

    @property
    def point_value(self) -> int:
        return rank_to_points(self.rank)

    @classmethod
    def from_label(cls, label: str, card_id: str | None = None) -> "Card":
        """Build a card from its face label; the id defaults to the label."""
        if len(label) < 2:
            raise ValueError(f"Invalid card label: {label!r}")
        try:
            rank, suit = Rank(label[:-1].upper()), Suit(label[-1].upper())
        except ValueError:
            raise ValueError(f"Invalid card label: {label!r}") from None
        return cls(id=card_id or label, rank=rank, suit=suit)

    def __str__(self) -> str:
        return self.label
