"""
Board model, clue reveal engine and board loader.

Exports:
- RevealState, Clue, Category and Board data types
- reveal, get_display_text and get_header_text for the clue state machine and
  what each cell and column header shows
- TriviaClient, select_categories, load_category and load_board for loading
- GameSession and GameRegistry for per-player game state
- the error taxonomy rooted at TriviaBoardError

These modules are framework-agnostic and can be reused by views or commands
without importing request objects.
"""

from .errors import (
    TriviaBoardError,
    InsufficientPoolError,
    FetchError,
    InvalidReferenceError,
    LoadInProgressError,
    StaleLoadError,
)
from .models import RevealState, Clue, Category, Board
from .reveal import reveal, get_display_text, get_header_text, HIDDEN_PLACEHOLDER
from .loader import TriviaClient, select_categories, load_category, load_board
from .session import GameSession
from .registry import GameRegistry

__all__ = [
    "TriviaBoardError",
    "InsufficientPoolError",
    "FetchError",
    "InvalidReferenceError",
    "LoadInProgressError",
    "StaleLoadError",
    "RevealState",
    "Clue",
    "Category",
    "Board",
    "reveal",
    "get_display_text",
    "get_header_text",
    "HIDDEN_PLACEHOLDER",
    "TriviaClient",
    "select_categories",
    "load_category",
    "load_board",
    "GameSession",
    "GameRegistry",
]
