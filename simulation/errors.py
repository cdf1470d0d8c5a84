"""
Exceptions raised by the season engine.
Illegal human actions are not exceptions: they come back as a TickResult with ok=False.
"""


class EngineError(Exception):
    """Base class for season engine errors."""


class UnknownEntityError(EngineError, KeyError):
    """A human action named a club, player or offer that does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"Unknown {kind}: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id

    def __str__(self) -> str:
        return self.args[0]


class CareerOverError(EngineError):
    """The career ended (second consecutive season in debt); no further ticks run."""
