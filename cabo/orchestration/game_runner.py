"""Single game runner."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from cabo.engine import (
    AssetsLoaded,
    DealingComplete,
    DrawPilePlaced,
    Engine,
    GameState,
    Intent,
    PlayerResult,
    PlayerView,
    RegisterPlayer,
    RuleConfig,
    Stage,
    StartDeal,
    winners,
)

if TYPE_CHECKING:
    from cabo.agent.protocol import AgentProtocol

logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    """Result of a completed game."""

    results: tuple[PlayerResult, ...]  # ranked ascending
    winners: tuple[int, ...]
    num_turns: int
    player_ids: tuple[int, ...]
    history: tuple[str, ...]

    @property
    def winner(self) -> Optional[int]:
        return self.winners[0] if self.winners else None


class GameRunner:
    """Runs a single Cabo game to completion.

    Agents are seated in the order given; the runner sends the pre-game
    signals a presentation layer would send and then asks the current
    player's agent for every in-game intent.
    """

    def __init__(
        self,
        agents: dict[str, "AgentProtocol"],
        rules: Optional[RuleConfig] = None,
        seed: Optional[int] = None,
        max_intents: int = 5000,
    ):
        self._agents = agents
        self._max_intents = max_intents
        self.engine = Engine(rules=rules, seed=seed)

    def _send(self, intent: Intent) -> GameState:
        result = self.engine.apply_intent(intent)
        if not result.ok:
            raise RuntimeError(f"Setup intent {intent} rejected: {result.error}")
        return result.state

    def setup(self) -> GameState:
        """Take the engine from asset loading to the first turn."""
        self._send(AssetsLoaded())
        self._send(DrawPilePlaced())
        for name in self._agents:
            self._send(RegisterPlayer(name=name))
        self._send(StartDeal())
        state = self._send(StartDeal())
        for pid, agent in zip(state.players, self._agents.values()):
            regard = getattr(agent, "regard_cards", None)
            if regard is not None:
                regard(PlayerView.from_state(state, pid))
        return self._send(DealingComplete())

    def run(self) -> GameResult:
        """Run the game and return the result."""
        state = self.setup()
        seats = dict(zip(state.players, self._agents.values()))
        num_turns = 0
        num_intents = 0

        while state.stage != Stage.GAME_OVER and num_intents < self._max_intents:
            pid = state.current_player
            agent = seats[pid]
            legal = self.engine.legal_intents()
            if not legal:
                logger.warning("No legal intents for player %d in %s", pid, state.stage.value)
                break

            player_view = PlayerView.from_state(state, pid)
            intent = agent.get_intent(player_view, legal, pid)
            if intent is None:
                intent = legal[0]

            result = self.engine.apply_intent(intent)
            num_intents += 1
            if not result.ok:
                logger.warning("%s rejected for player %d: %s", intent, pid, result.error)
                continue

            if state.stage == Stage.SELECTED_INTERACTION_TYPE and result.state.stage in (
                Stage.CURRENT_TURN,
                Stage.GAME_OVER,
            ):
                num_turns += 1
            state = result.state

        return GameResult(
            results=state.results,
            winners=tuple(r.player_id for r in winners(state.results)),
            num_turns=num_turns,
            player_ids=state.players,
            history=state.history,
        )
