"""Built-in agents."""

from cabo.agents.human_agent import HumanAgent

__all__ = ["HumanAgent"]
