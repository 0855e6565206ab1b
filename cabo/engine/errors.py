"""Engine error taxonomy.

Raised inside the engine; ``Engine.apply_intent`` turns them into return
values so they never cross the presentation boundary as exceptions.
"""


class EngineError(Exception):
    """Base class for every rejected intent."""


class IllegalTransition(EngineError):
    """The intent has no valid edge from the current state."""


class InsufficientCards(EngineError):
    """A pile ran out of cards during a deal or a draw."""


class CardNotInSource(EngineError):
    """A card id was not found in the container it was expected in."""


class InvalidPlayerCount(EngineError):
    """A deal was attempted with too few or too many players."""
