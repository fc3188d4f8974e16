from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Tuple

from .errors import InvalidReferenceError


# PUBLIC_INTERFACE
class RevealState(str, Enum):
    """Display progress of a single clue."""

    HIDDEN = "hidden"
    QUESTION = "question"
    ANSWER = "answer"


_NEXT_STATE = {
    RevealState.HIDDEN: RevealState.QUESTION,
    RevealState.QUESTION: RevealState.ANSWER,
}


# PUBLIC_INTERFACE
@dataclass(eq=False)
class Clue:
    """One question/answer pair with its own reveal state.

    question and answer are fixed at construction. The reveal state starts at
    HIDDEN and is only moved forward by trivia.board.reveal.reveal().
    """

    question: str
    answer: str
    _reveal_state: RevealState = field(default=RevealState.HIDDEN, init=False, repr=False)

    def __post_init__(self) -> None:
        # Sources occasionally send numeric answers.
        object.__setattr__(self, "question", str(self.question))
        object.__setattr__(self, "answer", str(self.answer))
        self._frozen = True

    def __setattr__(self, name: str, value) -> None:
        if name in ("question", "answer") and getattr(self, "_frozen", False):
            raise AttributeError(f"Clue.{name} cannot be changed after creation.")
        object.__setattr__(self, name, value)

    @property
    def reveal_state(self) -> RevealState:
        return self._reveal_state

    def _advance(self) -> bool:
        """Move one step along HIDDEN -> QUESTION -> ANSWER.

        Returns False when the clue already shows its answer.
        """
        next_state = _NEXT_STATE.get(self._reveal_state)
        if next_state is None:
            return False
        self._reveal_state = next_state
        return True


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Category:
    """A titled column of clues, ordered top to bottom."""

    title: str
    clues: Tuple[Clue, ...]

    @classmethod
    def build(cls, title: str, clues: Iterable[Clue]) -> "Category":
        return cls(title=str(title), clues=tuple(clues))


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Board:
    """The full set of categories for one game, ordered left to right.

    Fields:
    - categories: fixed tuple of categories (display column order)
    - generation: load generation that produced this board
    """

    categories: Tuple[Category, ...]
    generation: int = 0

    @property
    def category_count(self) -> int:
        return len(self.categories)

    @property
    def clues_per_category(self) -> int:
        if not self.categories:
            return 0
        return min(len(category.clues) for category in self.categories)

    def clue_at(self, column: int, row: int) -> Clue:
        """Resolve a (column, row) cell reference to its clue.

        Raises:
            InvalidReferenceError: if either coordinate is outside the board.
        """
        if not 0 <= column < len(self.categories):
            raise InvalidReferenceError(f"No category at column {column}.")
        clues = self.categories[column].clues
        if not 0 <= row < len(clues):
            raise InvalidReferenceError(f"No clue at column {column}, row {row}.")
        return clues[row]
