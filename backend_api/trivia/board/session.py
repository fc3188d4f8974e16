from __future__ import annotations

import logging
import threading
import uuid
from typing import Callable, Optional, Tuple

from .errors import InvalidReferenceError, LoadInProgressError, StaleLoadError
from .models import Board, Clue
from .reveal import reveal

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class GameSession:
    """Owns the current Board of one player's game.

    Every start bumps a load generation. Only the load holding the newest
    generation may commit its board, so a late result from an earlier start
    can never replace a newer board. The lock guards state transitions and is
    never held while a board is being fetched.
    """

    def __init__(self, game_id: Optional[str] = None):
        self.game_id = game_id or uuid.uuid4().hex
        self._lock = threading.Lock()
        self._generation = 0
        self._loading = False
        self._board: Optional[Board] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def board(self) -> Optional[Board]:
        return self._board

    # PUBLIC_INTERFACE
    def snapshot(self) -> Tuple[int, bool, Optional[Board]]:
        """Return (generation, loading, board) read under the lock."""
        with self._lock:
            return self._generation, self._loading, self._board

    # PUBLIC_INTERFACE
    def begin_load(self, supersede: bool = False) -> int:
        """Start a new load generation and clear the current board.

        Raises:
            LoadInProgressError: if a load is running and supersede is False.
        """
        with self._lock:
            if self._loading and not supersede:
                raise LoadInProgressError(f"Game {self.game_id} is already loading a board.")
            if self._loading:
                logger.info(f"Game {self.game_id}: generation {self._generation} superseded")
            self._generation += 1
            self._loading = True
            self._board = None
            return self._generation

    # PUBLIC_INTERFACE
    def complete_load(self, generation: int, board: Board) -> bool:
        """Commit a loaded board if its generation is still current."""
        with self._lock:
            if generation != self._generation:
                logger.info(
                    f"Game {self.game_id}: discarding stale board of generation "
                    f"{generation} (current {self._generation})"
                )
                return False
            self._board = board
            self._loading = False
            logger.info(f"Game {self.game_id}: board generation {generation} ready")
            return True

    # PUBLIC_INTERFACE
    def fail_load(self, generation: int) -> bool:
        """Clear the loading flag after a failed load of the current generation.

        Returns False when `generation` was already superseded; the newer load
        keeps its loading flag.
        """
        with self._lock:
            if generation != self._generation:
                return False
            self._loading = False
            return True

    # PUBLIC_INTERFACE
    def start(self, load: Callable[[int], Board], supersede: bool = False) -> Board:
        """Run a complete load: begin, fetch via `load(generation)`, commit.

        Raises:
            LoadInProgressError: see begin_load.
            StaleLoadError: if a newer start superseded this one meanwhile,
            whether this load succeeded or failed.
            Any error raised by a current `load` propagates after the game is reset.
        """
        generation = self.begin_load(supersede=supersede)
        try:
            board = load(generation)
        except Exception as e:
            if not self.fail_load(generation):
                logger.info(
                    f"Game {self.game_id}: superseded load of generation {generation} failed: {e}"
                )
                raise StaleLoadError(generation, self._generation) from e
            logger.warning(f"Game {self.game_id}: load of generation {generation} failed")
            raise
        if not self.complete_load(generation, board):
            raise StaleLoadError(generation, self._generation)
        return board

    # PUBLIC_INTERFACE
    def reveal(self, generation: int, column: int, row: int) -> Tuple[Clue, Optional[str]]:
        """Reveal the clue at (column, row) of the board for `generation`.

        Returns:
            (clue, text) where text is None when the click changed nothing.

        Raises:
            InvalidReferenceError: if there is no board, the generation is not
            the current board's, or the cell is out of range.
        """
        with self._lock:
            board = self._board
            if board is None or board.generation != generation:
                raise InvalidReferenceError(
                    f"Game {self.game_id} has no board for generation {generation}."
                )
            clue = board.clue_at(column, row)
            return clue, reveal(clue)
