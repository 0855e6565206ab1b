"""Rule configuration."""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from cabo.engine.actions import ActionTable, DEFAULT_ACTION_TABLE, parse_action_table

ENV_PREFIX = "CABO_"


@dataclass(frozen=True)
class RuleConfig:
    """Table rules for one game.

    regard_cards: how many of their first slots each player may look at
        between the deal and the first turn (capped at cards_per_player).
    mismatch_penalty: cards drawn into the acting hand after a failed
        matched-pair discard. Off by default.
    reshuffle_discard: refill an empty draw pile from the discard pile
        (all but its top card) instead of failing the draw.
    """

    cards_per_player: int = 4
    regard_cards: int = 2
    min_players: int = 2
    max_players: int = 8
    mismatch_penalty: int = 0
    reshuffle_discard: bool = True
    action_table: ActionTable = field(default_factory=lambda: DEFAULT_ACTION_TABLE)

    def __post_init__(self) -> None:
        if self.cards_per_player < 1:
            raise ValueError(f"cards_per_player must be positive, got {self.cards_per_player}")
        if self.regard_cards < 0:
            raise ValueError(f"regard_cards must not be negative, got {self.regard_cards}")
        if self.min_players < 2:
            raise ValueError(f"min_players must be at least 2, got {self.min_players}")
        if self.max_players < self.min_players:
            raise ValueError(
                f"max_players ({self.max_players}) is below min_players ({self.min_players})"
            )
        if self.mismatch_penalty < 0:
            raise ValueError(f"mismatch_penalty must not be negative, got {self.mismatch_penalty}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RuleConfig":
        """Read overrides from CABO_* environment variables."""
        env = os.environ if environ is None else environ
        kwargs = {}
        for name in ("cards_per_player", "regard_cards", "min_players", "max_players", "mismatch_penalty"):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None and raw.strip():
                try:
                    kwargs[name] = int(raw)
                except ValueError:
                    raise ValueError(f"{ENV_PREFIX}{name.upper()} must be an integer, got {raw!r}") from None

        raw = env.get(ENV_PREFIX + "RESHUFFLE_DISCARD")
        if raw is not None and raw.strip():
            kwargs["reshuffle_discard"] = _parse_bool(raw, ENV_PREFIX + "RESHUFFLE_DISCARD")

        raw = env.get(ENV_PREFIX + "ACTION_TABLE")
        if raw is not None and raw.strip():
            kwargs["action_table"] = parse_action_table(raw)

        return cls(**kwargs)


def _parse_bool(raw: str, name: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")
