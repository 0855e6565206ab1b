"""Game state for Cabo."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from cabo.engine.card import Card, Rank
from cabo.engine.config import RuleConfig
from cabo.engine.interactions import Interaction
from cabo.engine.scoring import PlayerResult
from cabo.engine.table import Hand, Table


class Phase(str, Enum):
    """Top-level game phases."""

    PRE_GAME = "pre_game"
    IN_GAME = "in_game"
    POST_GAME = "post_game"


class Stage(str, Enum):
    """Sub-states of each phase."""

    LOADING_ASSETS = "loading_assets"
    PLACE_DRAW_PILE = "place_draw_pile"
    SET_PLAYER_POSITIONS = "set_player_positions"
    REGARD_CARDS = "regard_cards"
    DEALING_CARDS = "dealing_cards"
    CURRENT_TURN = "current_turn"
    WAIT_FOR_INTERACTION_TYPE_SELECTION = "wait_for_interaction_type_selection"
    SELECTED_INTERACTION_TYPE = "selected_interaction_type"
    GAME_OVER = "game_over"

    @property
    def phase(self) -> Phase:
        if self in _PRE_GAME:
            return Phase.PRE_GAME
        if self == Stage.GAME_OVER:
            return Phase.POST_GAME
        return Phase.IN_GAME


_PRE_GAME = (
    Stage.LOADING_ASSETS,
    Stage.PLACE_DRAW_PILE,
    Stage.SET_PLAYER_POSITIONS,
    Stage.REGARD_CARDS,
)


@dataclass(frozen=True)
class GameState:
    """Immutable Cabo game state.

    Every transition produces a new instance with ``version`` incremented,
    so the sequence of states is a total order of the game's history.
    """

    stage: Stage = Stage.LOADING_ASSETS
    players: Tuple[int, ...] = ()  # table order
    names: Dict[int, str] = field(default_factory=dict)
    next_player_id: int = 0
    table: Table = field(default_factory=Table)
    current_player: Optional[int] = None
    selection: Optional[Interaction] = None
    last_round_caller: Optional[int] = None
    results: Tuple[PlayerResult, ...] = ()  # ranked ascending
    rules: RuleConfig = field(default_factory=RuleConfig)
    seed: int = 0
    round_number: int = 0
    version: int = 0
    history: Tuple[str, ...] = ()  # log of events

    @property
    def phase(self) -> Phase:
        return self.stage.phase

    def hand(self, player_id: int) -> Hand:
        return self.table.hand(player_id)

    @property
    def drawn_card(self) -> Optional[Card]:
        """The card held by the current player, if any."""
        if self.current_player is None or self.current_player not in self.table.player_ids:
            return None
        return self.table.hand(self.current_player).drawn

    @property
    def drawn_value(self) -> Optional[Rank]:
        card = self.drawn_card
        return card.rank if card else None

    def top_discard(self) -> Optional[Card]:
        """Return the top card on the discard pile."""
        return self.table.discard_pile.top()

    def player_name(self, player_id: int) -> str:
        return self.names.get(player_id) or f"Player {player_id}"


@dataclass
class SlotView:
    """One hand slot as seen by a single player. ``card`` is None when covered."""

    card_id: str
    card: Optional[Card]
    face_up: bool


@dataclass
class PlayerView:
    """Filtered game state visible to a single player.

    A slot's card is visible only when it is face up for everyone or was
    peeked at by this player. The drawn card is visible only to its holder.
    """

    viewer: int
    stage: Stage
    current_player: Optional[int]
    my_hand: List[SlotView]
    other_hands: Dict[int, List[SlotView]]
    drawn_card: Optional[Card]
    selection: Optional[Interaction]
    top_discard: Optional[Card]
    draw_pile_size: int
    num_cards_per_player: Dict[int, int]
    player_order: Tuple[int, ...]
    last_round_caller: Optional[int]
    results: Tuple[PlayerResult, ...]
    history: List[str]  # recent game events

    @classmethod
    def from_state(cls, state: GameState, player_id: int) -> "PlayerView":
        """Create a player view from full game state, hiding covered cards."""

        def slots(hand: Hand) -> List[SlotView]:
            return [
                SlotView(
                    card_id=s.card.id,
                    card=s.card if s.visible_to(player_id) else None,
                    face_up=s.face_up,
                )
                for s in hand.slots
            ]

        hands = {h.player_id: h for h in state.table.hands}
        own = hands.get(player_id)
        return cls(
            viewer=player_id,
            stage=state.stage,
            current_player=state.current_player,
            my_hand=slots(own) if own else [],
            other_hands={pid: slots(h) for pid, h in hands.items() if pid != player_id},
            drawn_card=own.drawn if own else None,
            selection=state.selection,
            top_discard=state.top_discard(),
            draw_pile_size=len(state.table.draw_pile),
            num_cards_per_player={pid: len(h) for pid, h in hands.items()},
            player_order=state.players,
            last_round_caller=state.last_round_caller,
            results=state.results,
            history=list(state.history[-10:]),  # last 10 events
        )
