"""Game orchestration."""

from cabo.orchestration.game_runner import GameResult, GameRunner

__all__ = ["GameResult", "GameRunner"]
