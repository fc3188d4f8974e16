"""
Trivia board app package initializer.

Re-exports the board model, reveal engine and loader so callers can import
from trivia directly, e.g.:

    from trivia import reveal, load_board
"""

# PUBLIC_INTERFACE
from .board import (
    RevealState,
    Clue,
    Category,
    Board,
    reveal,
    get_display_text,
    select_categories,
    load_category,
    load_board,
    GameSession,
)

__all__ = [
    "RevealState",
    "Clue",
    "Category",
    "Board",
    "reveal",
    "get_display_text",
    "select_categories",
    "load_category",
    "load_board",
    "GameSession",
]
