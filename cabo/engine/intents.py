"""Intents: the discrete inputs the presentation layer sends to the engine."""

from dataclasses import dataclass
from typing import Optional, Union

from cabo.engine.deck import PileKind
from cabo.engine.interactions import Interaction


@dataclass(frozen=True)
class AssetsLoaded:
    """Presentation layer finished loading its assets."""


@dataclass(frozen=True)
class DrawPilePlaced:
    """The draw pile has been placed on the table."""


@dataclass(frozen=True)
class RegisterPlayer:
    """Add a player at the next table position."""

    name: Optional[str] = None


@dataclass(frozen=True)
class UnregisterPlayer:
    """Remove a registered player before the deal."""

    player_id: int


@dataclass(frozen=True)
class StartDeal:
    """Tap on the draw pile to deal (and again to start the game)."""


@dataclass(frozen=True)
class DealingComplete:
    """The dealing animation finished."""


@dataclass(frozen=True)
class DrawCard:
    """The current player draws the top card of a pile."""

    pile: PileKind = PileKind.DRAW


@dataclass(frozen=True)
class SelectInteraction:
    """Choose what to do with the drawn card."""

    interaction: Interaction


@dataclass(frozen=True)
class Undo:
    """Abandon the selected interaction and choose again."""


@dataclass(frozen=True)
class TapTarget:
    """The current player tapped a card."""

    card_id: str


@dataclass(frozen=True)
class EndReveal:
    """The peek/spy reveal interval has elapsed."""


@dataclass(frozen=True)
class CallLastRound:
    """The current player calls the last round ("Cabo")."""


@dataclass(frozen=True)
class Reset:
    """Start over after a finished game."""


Intent = Union[
    AssetsLoaded,
    DrawPilePlaced,
    RegisterPlayer,
    UnregisterPlayer,
    StartDeal,
    DealingComplete,
    DrawCard,
    SelectInteraction,
    Undo,
    TapTarget,
    EndReveal,
    CallLastRound,
    Reset,
]
