"""CLI entry point."""

from __future__ import annotations

import logging
import sys
from typing import Optional

import typer
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(help="Cabo card game rules engine")


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _load_rules() -> "RuleConfig":
    from cabo.engine import RuleConfig

    try:
        return RuleConfig.from_env()
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def play(
    players: str = typer.Option(
        "Alice,Bob",
        "--players",
        "-p",
        help="Comma-separated player names, in table order",
    ),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Logging level"),
) -> None:
    """Play a hot-seat game in the terminal."""
    from cabo.agents.human_agent import HumanAgent
    from cabo.engine.scoring import format_results
    from cabo.orchestration.game_runner import GameRunner

    _setup_logging(log_level)
    names = [n.strip() for n in players.split(",") if n.strip()]
    if len(set(names)) != len(names):
        raise typer.BadParameter("Player names must be unique.")
    config = _load_rules()
    if not config.min_players <= len(names) <= config.max_players:
        raise typer.BadParameter(
            f"Between {config.min_players} and {config.max_players} players are required."
        )

    agents = {name: HumanAgent(name=name) for name in names}
    runner = GameRunner(agents, rules=config, seed=seed)
    result = runner.run()
    labels = dict(zip(result.player_ids, names))
    typer.echo("")
    typer.echo(format_results(result.results, labels))
    typer.echo(f"Turns: {result.num_turns}")


@app.command()
def rules() -> None:
    """Show the active action table and card points."""
    from cabo.engine import Rank, rank_to_points

    config = _load_rules()
    table = config.action_table.as_dict()
    typer.echo(f"Cards per player: {config.cards_per_player}")
    typer.echo(f"Cards looked at before the first turn: {config.regard_cards}")
    typer.echo(f"Players: {config.min_players}-{config.max_players}")
    typer.echo(f"Mismatch penalty: {config.mismatch_penalty}")
    typer.echo("")
    typer.echo("Rank  Points  Action")
    for rank in Rank:
        typer.echo(f"{rank.value:<5} {rank_to_points(rank):<7} {table[rank].value}")


if __name__ == "__main__":
    app()
