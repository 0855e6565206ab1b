"""Game engine for Cabo."""

from cabo.engine.actions import ActionKind, ActionTable, DEFAULT_ACTION_TABLE, unlocked_action
from cabo.engine.card import Card, Rank, Suit, rank_to_points
from cabo.engine.config import RuleConfig
from cabo.engine.deck import Pile, PileKind, create_deck, deal
from cabo.engine.engine import Engine, IntentResult
from cabo.engine.errors import (
    CardNotInSource,
    EngineError,
    IllegalTransition,
    InsufficientCards,
    InvalidPlayerCount,
)
from cabo.engine.game_state import GameState, Phase, PlayerView, Stage
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
from cabo.engine.interactions import Discard, Interaction, PerformAction, SwapWithOwnCard
from cabo.engine.rules import apply_intent, get_legal_intents, new_game, next_player
from cabo.engine.scoring import PlayerResult, rank_results, score_hand, winners
from cabo.engine.table import Hand, Location, Slot, Table

__all__ = [
    "ActionKind",
    "ActionTable",
    "DEFAULT_ACTION_TABLE",
    "unlocked_action",
    "Card",
    "Rank",
    "Suit",
    "rank_to_points",
    "RuleConfig",
    "Pile",
    "PileKind",
    "create_deck",
    "deal",
    "Engine",
    "IntentResult",
    "CardNotInSource",
    "EngineError",
    "IllegalTransition",
    "InsufficientCards",
    "InvalidPlayerCount",
    "GameState",
    "Phase",
    "PlayerView",
    "Stage",
    "AssetsLoaded",
    "CallLastRound",
    "DealingComplete",
    "DrawCard",
    "DrawPilePlaced",
    "EndReveal",
    "Intent",
    "RegisterPlayer",
    "Reset",
    "SelectInteraction",
    "StartDeal",
    "TapTarget",
    "Undo",
    "UnregisterPlayer",
    "Discard",
    "Interaction",
    "PerformAction",
    "SwapWithOwnCard",
    "apply_intent",
    "get_legal_intents",
    "new_game",
    "next_player",
    "PlayerResult",
    "rank_results",
    "score_hand",
    "winners",
    "Hand",
    "Location",
    "Slot",
    "Table",
]
