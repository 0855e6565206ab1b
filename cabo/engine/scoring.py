"""End-of-game scoring."""

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence

from cabo.engine.table import Hand, Table


@dataclass(frozen=True)
class PlayerResult:
    """Final points of one player. Lower is better."""

    player_id: int
    total_points: int


def score_hand(hand: Hand) -> int:
    """Sum of the point values of every card left in the hand."""
    return sum(slot.card.point_value for slot in hand.slots)


def score_table(table: Table, order: Sequence[int]) -> List[PlayerResult]:
    """Score every player in table order."""
    return [PlayerResult(player_id=pid, total_points=score_hand(table.hand(pid))) for pid in order]


def rank_results(results: Iterable[PlayerResult]) -> List[PlayerResult]:
    """Sort ascending by total. Ties keep their input order."""
    return sorted(results, key=lambda r: r.total_points)


def winners(results: Iterable[PlayerResult]) -> List[PlayerResult]:
    """All players sharing the lowest total."""
    results = list(results)
    if not results:
        return []
    best = min(r.total_points for r in results)
    return [r for r in results if r.total_points == best]


def format_results(
    results: Iterable[PlayerResult],
    names: Optional[Mapping[int, str]] = None,
) -> str:
    """Render ranked results as a game-over summary."""
    names = names or {}
    ranked = rank_results(results)
    if not ranked:
        return "Game Over"

    def label(pid: int) -> str:
        return names.get(pid) or f"Player {pid}"

    lines = [f"Game Over, {label(ranked[0].player_id)} won!", "", "Results:"]
    for i, result in enumerate(ranked, start=1):
        lines.append(f"{i}. {label(result.player_id)} - {result.total_points} points")
    return "\n".join(lines)
