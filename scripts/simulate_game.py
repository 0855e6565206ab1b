"""Simulate a game with random intents and check card conservation."""

import random

from cabo.engine import CallLastRound, GameState, Intent, PlayerView
from cabo.engine.scoring import format_results
from cabo.orchestration.game_runner import GameRunner


class RandomAgent:
    def __init__(self, name, rng):
        self.name = name
        self._rng = rng

    def get_intent(self, view: PlayerView, intents: list[Intent], player_id: int) -> Intent | None:
        if not intents:
            return None

        # Log the last move from history to see the game progress
        if view.history:
            print(f"> {view.history[-1]}")

        # Rarely call the last round so the game lasts a while
        others = [i for i in intents if not isinstance(i, CallLastRound)]
        if others and self._rng.random() > 0.02:
            return self._rng.choice(others)
        return self._rng.choice(intents)


def check_conservation(state: GameState) -> None:
    ids = [card.id for card in state.table.all_cards()]
    assert len(ids) == len(set(ids)), f"duplicated cards at v{state.version}"
    if ids:
        assert len(ids) == 52, f"{52 - len(ids)} cards lost at v{state.version}"


def main():
    rng = random.Random(42)
    agents = {name: RandomAgent(name, rng) for name in ("Bot1", "Bot2", "Bot3", "Bot4")}

    runner = GameRunner(agents, seed=42)
    runner.engine.subscribe(check_conservation)
    result = runner.run()

    print(format_results(result.results, dict(zip(result.player_ids, agents))))
    print(f"Turns: {result.num_turns}")


if __name__ == "__main__":
    main()
