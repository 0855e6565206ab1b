"""Engine facade: the single owner of the current game state."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from cabo.engine.config import RuleConfig
from cabo.engine.errors import EngineError, IllegalTransition
from cabo.engine.game_state import GameState
from cabo.engine.intents import Intent, Reset
from cabo.engine.rules import apply_intent, get_legal_intents, new_game

logger = logging.getLogger(__name__)

StateHandler = Callable[[GameState], None]


@dataclass(frozen=True)
class IntentResult:
    """Outcome of ``Engine.apply_intent``.

    On rejection ``error`` is set and ``state`` is the unchanged current state.
    """

    state: GameState
    error: Optional[EngineError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Engine:
    """Owns the game state and publishes every new state to subscribers.

    Not thread-safe: a multi-threaded host must serialize calls to
    ``apply_intent``. Intents sent from inside a subscriber callback are
    rejected. A subscriber that raises is logged and skipped; the new state
    stays committed.
    """

    def __init__(self, rules: Optional[RuleConfig] = None, seed: Optional[int] = None):
        self._state = new_game(rules=rules, seed=seed)
        self._history: List[GameState] = [self._state]
        self._subscribers: List[StateHandler] = []
        self._notifying = False

    def current_state(self) -> GameState:
        """Return the current state. States are immutable, so this is a snapshot."""
        return self._state

    def history(self) -> Tuple[GameState, ...]:
        """Every committed state since construction or the last reset, oldest first."""
        return tuple(self._history)

    def legal_intents(self) -> List[Intent]:
        return get_legal_intents(self._state)

    def subscribe(self, handler: StateHandler) -> Callable[[], None]:
        """Register ``handler`` for new states. Returns a function that unsubscribes it."""
        self._subscribers.append(handler)

        def unsubscribe() -> None:
            if handler in self._subscribers:
                self._subscribers.remove(handler)

        return unsubscribe

    def apply_intent(self, intent: Intent) -> IntentResult:
        """Validate and apply an intent. Errors are returned, never raised."""
        if self._notifying:
            return self._reject(
                intent, IllegalTransition("Intents cannot be sent while subscribers are notified")
            )
        try:
            new_state = apply_intent(self._state, intent)
        except EngineError as exc:
            return self._reject(intent, exc)

        if new_state is self._state:
            return IntentResult(state=new_state)

        self._state = new_state
        if isinstance(intent, Reset):
            self._history = [new_state]
        else:
            self._history.append(new_state)
        self._notify(new_state)
        return IntentResult(state=new_state)

    def _reject(self, intent: Intent, error: EngineError) -> IntentResult:
        logger.debug("Rejected %s: %s: %s", intent, type(error).__name__, error)
        return IntentResult(state=self._state, error=error)

    def _notify(self, state: GameState) -> None:
        self._notifying = True
        try:
            for handler in list(self._subscribers):
                try:
                    handler(state)
                except Exception:
                    # the state is already committed
                    logger.error("Error in state subscriber %r", handler, exc_info=True)
        finally:
            self._notifying = False
