from __future__ import annotations


# PUBLIC_INTERFACE
class TriviaBoardError(Exception):
    """Base class for every error raised by the board package."""


# PUBLIC_INTERFACE
class InsufficientPoolError(TriviaBoardError, ValueError):
    """Fewer distinct categories are available than were requested."""

    def __init__(self, available: int, requested: int):
        self.available = available
        self.requested = requested
        super().__init__(
            f"Category pool holds {available} distinct ids, {requested} requested."
        )


# PUBLIC_INTERFACE
class FetchError(TriviaBoardError):
    """The trivia source was unreachable or returned malformed data."""


# PUBLIC_INTERFACE
class InvalidReferenceError(TriviaBoardError, LookupError):
    """A reveal targeted a clue that does not exist on the current board."""


# PUBLIC_INTERFACE
class LoadInProgressError(TriviaBoardError):
    """A new game was requested while the previous board is still loading."""


# PUBLIC_INTERFACE
class StaleLoadError(TriviaBoardError):
    """A finished load was discarded because a newer one had started."""

    def __init__(self, generation: int, current: int):
        self.generation = generation
        self.current = current
        super().__init__(
            f"Load generation {generation} was superseded by generation {current}."
        )
