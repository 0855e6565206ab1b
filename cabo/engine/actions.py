"""Special actions unlocked by the rank of a drawn card."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Tuple

from cabo.engine.card import Rank


class ActionKind(str, Enum):
    """Special action a drawn card may unlock."""

    PEEK = "peek"  # look at one of your own covered cards
    SPY = "spy"  # look at one covered card of another player
    SWAP = "swap"  # exchange one own covered card with another player's
    NONE = "none"


@dataclass(frozen=True)
class ActionTable:
    """Rank -> ActionKind mapping. Ranks not listed unlock nothing."""

    entries: Tuple[Tuple[Rank, ActionKind], ...] = ()

    @classmethod
    def from_mapping(cls, mapping: Mapping[Rank, ActionKind]) -> "ActionTable":
        ordered = sorted(mapping.items(), key=lambda item: list(Rank).index(item[0]))
        return cls(entries=tuple(ordered))

    def as_dict(self) -> Dict[Rank, ActionKind]:
        return {rank: self.lookup(rank) for rank in Rank}

    def lookup(self, rank: Rank) -> ActionKind:
        for entry_rank, kind in self.entries:
            if entry_rank == rank:
                return kind
        return ActionKind.NONE


DEFAULT_ACTION_TABLE = ActionTable.from_mapping(
    {
        Rank.SEVEN: ActionKind.PEEK,
        Rank.EIGHT: ActionKind.PEEK,
        Rank.NINE: ActionKind.SPY,
        Rank.TEN: ActionKind.SPY,
        Rank.JACK: ActionKind.SWAP,
        Rank.QUEEN: ActionKind.SWAP,
    }
)


def unlocked_action(rank: Rank, table: ActionTable = DEFAULT_ACTION_TABLE) -> ActionKind:
    """Return the action a drawn card of ``rank`` unlocks."""
    return table.lookup(rank)


def parse_action_table(text: str) -> ActionTable:
    """Parse ``"7:peek,8:peek,9:spy"`` into an ActionTable."""
    mapping: Dict[Rank, ActionKind] = {}
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        if ":" not in part:
            raise ValueError(f"Invalid action table entry: {part!r} (expected RANK:ACTION)")
        rank, kind = (s.strip() for s in part.split(":", 1))
        try:
            mapping[Rank(rank.upper())] = ActionKind(kind.lower())
        except ValueError:
            raise ValueError(f"Invalid action table entry: {part!r}") from None
    return ActionTable.from_mapping(mapping)
