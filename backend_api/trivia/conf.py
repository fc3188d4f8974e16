"""
Board settings resolved from Django settings.

settings.TRIVIA_BOARD may override any key of DEFAULTS, e.g.:

    TRIVIA_BOARD = {"CATEGORY_COUNT": 4, "API_BASE_URL": "http://localhost:8001/api"}
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict

from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver

from .board import GameRegistry, TriviaClient

DEFAULTS: Dict[str, Any] = {
    "API_BASE_URL": "https://jservice.io/api",
    "CATEGORY_COUNT": 6,
    "CLUES_PER_CATEGORY": 5,
    "CATEGORY_POOL_SIZE": 100,
    "REQUEST_TIMEOUT": 10.0,
    "PLACEHOLDER": "?",
    "MAX_GAMES": 1000,
}


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class BoardConfig:
    """Resolved board configuration."""

    api_base_url: str
    category_count: int
    clues_per_category: int
    category_pool_size: int
    request_timeout: float
    placeholder: str
    max_games: int


# PUBLIC_INTERFACE
def get_board_config() -> BoardConfig:
    """Merge settings.TRIVIA_BOARD over DEFAULTS."""
    values = {**DEFAULTS, **getattr(settings, "TRIVIA_BOARD", {})}
    config = BoardConfig(
        api_base_url=str(values["API_BASE_URL"]),
        category_count=int(values["CATEGORY_COUNT"]),
        clues_per_category=int(values["CLUES_PER_CATEGORY"]),
        category_pool_size=int(values["CATEGORY_POOL_SIZE"]),
        request_timeout=float(values["REQUEST_TIMEOUT"]),
        placeholder=str(values["PLACEHOLDER"]),
        max_games=int(values["MAX_GAMES"]),
    )
    if config.category_count < 1 or config.clues_per_category < 1:
        raise ValueError("CATEGORY_COUNT and CLUES_PER_CATEGORY must be positive.")
    return config


# PUBLIC_INTERFACE
def get_trivia_client() -> TriviaClient:
    """Build a TriviaClient pointed at the configured source."""
    config = get_board_config()
    return TriviaClient(base_url=config.api_base_url, timeout=config.request_timeout)


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_registry() -> GameRegistry:
    """Process-wide registry of live games.

    Built on first use; a change to TRIVIA_BOARD drops it so the next call
    picks up the new MAX_GAMES.
    """
    return GameRegistry(max_games=get_board_config().max_games)


@receiver(setting_changed)
def _reset_registry(*, setting, **kwargs):
    if setting == "TRIVIA_BOARD":
        get_registry.cache_clear()
