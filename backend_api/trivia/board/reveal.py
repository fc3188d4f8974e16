from __future__ import annotations

from typing import Optional

from .errors import InvalidReferenceError
from .models import Category, Clue, RevealState


HIDDEN_PLACEHOLDER = "?"


# PUBLIC_INTERFACE
def reveal(clue: Optional[Clue]) -> Optional[str]:
    """Advance a clue one step and return the text the cell should now show.

    Transitions:
        HIDDEN   -> QUESTION, returns clue.question
        QUESTION -> ANSWER,   returns clue.answer
        ANSWER   -> ANSWER,   returns None (no display update)

    Parameters:
        clue: the clue targeted by a cell activation.

    Raises:
        InvalidReferenceError: if clue is None (the cell resolved to nothing).
    """
    if clue is None:
        raise InvalidReferenceError("Reveal called without a clue.")
    if not clue._advance():
        return None
    if clue.reveal_state is RevealState.QUESTION:
        return clue.question
    return clue.answer


# PUBLIC_INTERFACE
def get_display_text(clue: Clue, placeholder: str = HIDDEN_PLACEHOLDER) -> str:
    """Return the text a cell shows for the clue's current reveal state."""
    state = clue.reveal_state
    if state is RevealState.QUESTION:
        return clue.question
    if state is RevealState.ANSWER:
        return clue.answer
    return placeholder


# PUBLIC_INTERFACE
def get_header_text(category: Category) -> str:
    """Return the column header shown above a category: its title in capitals."""
    return category.title.upper()
