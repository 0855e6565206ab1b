"""Interaction kinds a player can choose for a drawn card."""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from cabo.engine.actions import ActionKind, ActionTable, DEFAULT_ACTION_TABLE
from cabo.engine.card import Rank


@dataclass(frozen=True)
class Discard:
    """Discard the drawn card, optionally together with matching covered cards."""

    def __str__(self) -> str:
        return "discard"


@dataclass(frozen=True)
class SwapWithOwnCard:
    """Put the drawn card into one of your slots and discard the card it replaces."""

    def __str__(self) -> str:
        return "swap with own card"


@dataclass(frozen=True)
class PerformAction:
    """Use the special action the drawn card unlocks.

    ``picks`` holds the card ids memorized so far for a swap (0, 1 or 2 of
    them). ``revealed`` is the card currently shown by a peek or spy.
    """

    action: ActionKind
    picks: Tuple[str, ...] = ()
    revealed: Optional[str] = None

    @property
    def memorized(self) -> int:
        return len(self.picks)

    def __str__(self) -> str:
        if self.action == ActionKind.SWAP:
            return f"swap ({self.memorized}/2)"
        return self.action.value


Interaction = Union[Discard, SwapWithOwnCard, PerformAction]


def legal_interactions(rank: Rank, table: ActionTable = DEFAULT_ACTION_TABLE) -> List[Interaction]:
    """Interactions selectable for a drawn card of ``rank``."""
    options: List[Interaction] = [Discard(), SwapWithOwnCard()]
    action = table.lookup(rank)
    if action != ActionKind.NONE:
        options.append(PerformAction(action=action))
    return options
