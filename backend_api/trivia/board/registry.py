from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Optional

from .session import GameSession

logger = logging.getLogger(__name__)

DEFAULT_MAX_GAMES = 1000


# PUBLIC_INTERFACE
class GameRegistry:
    """In-memory registry mapping game ids to their GameSession.

    Games live only as long as the process. When more than `max_games` are
    held, the least recently created one is dropped.
    """

    def __init__(self, max_games: int = DEFAULT_MAX_GAMES):
        if max_games < 1:
            raise ValueError("max_games must be at least 1")
        self.max_games = max_games
        self._lock = threading.Lock()
        self._games: "OrderedDict[str, GameSession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._games)

    def create(self, game_id: Optional[str] = None) -> GameSession:
        """Register and return a new game session."""
        session = GameSession(game_id=game_id)
        with self._lock:
            self._games[session.game_id] = session
            while len(self._games) > self.max_games:
                evicted, _ = self._games.popitem(last=False)
                logger.info(f"Evicted game {evicted}")
        return session

    def get(self, game_id: str) -> GameSession:
        """Return the session for a game id, or raise KeyError."""
        with self._lock:
            if game_id not in self._games:
                raise KeyError(f"Unknown game: {game_id!r}")
            return self._games[game_id]

    def get_or_create(self, game_id: Optional[str] = None) -> GameSession:
        if game_id is None:
            return self.create()
        return self.get(game_id)

    def clear(self) -> None:
        with self._lock:
            self._games.clear()
