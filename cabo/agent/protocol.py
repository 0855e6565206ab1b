"""Agent protocol - the presentation layer that turns player input into intents."""

from typing import Protocol, runtime_checkable

from cabo.engine import Intent, PlayerView


@runtime_checkable
class AgentProtocol(Protocol):
    """Interface for anything that plays a seat at the table."""

    @property
    def name(self) -> str:
        """Display name for the agent."""
        ...

    def get_intent(
        self,
        player_view: PlayerView,
        legal_intents: list[Intent],
        player_id: int,
    ) -> Intent | None:
        """Choose the next intent given the player view and legal intents.

        Args:
            player_view: Filtered view showing only what this player may see.
            legal_intents: Intents the engine accepts right now.
            player_id: This agent's player ID.

        Returns:
            One of the legal intents, or None to take the first one.
        """
        ...

    def regard_cards(self, player_view: PlayerView) -> None:
        """Show the player the cards they may look at before the first turn.

        Optional; the runner skips agents that do not define it.
        """
        ...
