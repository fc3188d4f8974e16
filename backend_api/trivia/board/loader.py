from __future__ import annotations

import logging
import random
from typing import Any, Dict, Hashable, List, Optional, Protocol, Sequence

import requests

from .errors import FetchError, InsufficientPoolError
from .models import Board, Category, Clue

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://jservice.io/api"
DEFAULT_TIMEOUT = 10.0


class _TriviaSource(Protocol):
    """Minimal interface the loader needs from a trivia data source."""

    def get_category_pool(self, count: int, min_clues: int = 0) -> List[Any]: ...

    def get_category(self, category_id: Any) -> Dict[str, Any]: ...


# PUBLIC_INTERFACE
class TriviaClient:
    """HTTP client for a jService-style trivia API.

    Endpoints used:
    - GET {base_url}/categories?count=N -> [{id, title, clues_count}, ...]
    - GET {base_url}/category?id=ID    -> {id, title, clues: [...]}
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def close(self) -> None:
        """Release the pooled connections of the underlying session."""
        self.session.close()

    def __enter__(self) -> "TriviaClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.error(f"Error fetching {url}: {e}")
            raise FetchError(f"Trivia source request failed: {url}") from e
        except ValueError as e:
            # Body was not JSON.
            logger.error(f"Invalid JSON from {url}: {e}")
            raise FetchError(f"Trivia source returned invalid JSON: {url}") from e

    # PUBLIC_INTERFACE
    def get_category_pool(self, count: int, min_clues: int = 0) -> List[Any]:
        """Return the ids of up to `count` categories offered by the source.

        Categories advertising fewer than `min_clues` clues are skipped.
        """
        data = self._get_json("categories", {"count": count})
        if not isinstance(data, list):
            raise FetchError("Category list response is not a list.")
        ids: List[Any] = []
        for entry in data:
            if not isinstance(entry, dict) or "id" not in entry:
                raise FetchError("Category list entry has no id.")
            clues_count = entry.get("clues_count")
            if min_clues and isinstance(clues_count, int) and clues_count < min_clues:
                continue
            ids.append(entry["id"])
        logger.info(f"Fetched category pool of {len(ids)} ids")
        return ids

    # PUBLIC_INTERFACE
    def get_category(self, category_id: Any) -> Dict[str, Any]:
        """Return the raw payload for one category."""
        data = self._get_json("category", {"id": category_id})
        if not isinstance(data, dict):
            raise FetchError(f"Category {category_id!r} response is not an object.")
        return data


# PUBLIC_INTERFACE
def select_categories(
    pool: Sequence[Hashable], count: int, rng: Optional[random.Random] = None
) -> List[Hashable]:
    """Pick `count` distinct category ids uniformly at random, without replacement.

    Raises:
        ValueError: if count is negative.
        InsufficientPoolError: if the pool has fewer than `count` distinct ids.
    """
    if count < 0:
        raise ValueError("count must not be negative")
    distinct = list(dict.fromkeys(pool))
    if len(distinct) < count:
        raise InsufficientPoolError(available=len(distinct), requested=count)
    return (rng or random).sample(distinct, count)


def _parse_clue(raw: Any, category_id: Any) -> Clue:
    if not isinstance(raw, dict) or "question" not in raw or "answer" not in raw:
        raise FetchError(f"Category {category_id!r} has a clue without question/answer.")
    return Clue(question=raw["question"], answer=raw["answer"])


# PUBLIC_INTERFACE
def load_category(category_id: Any, client: _TriviaSource) -> Category:
    """Fetch one category and build it with every clue hidden.

    The clue list is kept whole and in source order.

    Raises:
        FetchError: if the source fails or the payload lacks title/clues.
    """
    data = client.get_category(category_id)
    if not isinstance(data, dict):
        raise FetchError(f"Category {category_id!r} response is not an object.")
    if "title" not in data or not isinstance(data.get("clues"), list):
        raise FetchError(f"Category {category_id!r} response is missing title or clues.")
    clues = [_parse_clue(raw, category_id) for raw in data["clues"]]
    logger.debug(f"Loaded category {category_id!r} with {len(clues)} clues")
    return Category.build(title=data["title"], clues=clues)


# PUBLIC_INTERFACE
def load_board(
    category_count: int,
    pool: Optional[Sequence[Hashable]] = None,
    client: Optional[_TriviaSource] = None,
    clues_per_category: int = 5,
    pool_size: int = 100,
    generation: int = 0,
    rng: Optional[random.Random] = None,
) -> Board:
    """Select categories, load them one after another and assemble a Board.

    Parameters:
        category_count: number of columns on the board.
        pool: candidate category ids. Fetched from the client when omitted.
        client: trivia source; a default TriviaClient is used when omitted.
        clues_per_category: rows kept from each category.
        pool_size: how many categories to request when fetching the pool.
        generation: load generation stamped on the resulting board.
        rng: random source used for selection.

    Returns:
        A Board with exactly category_count categories of clues_per_category
        hidden clues each.

    Raises:
        InsufficientPoolError, FetchError: any failure aborts the whole load.
    """
    client = client or TriviaClient()
    if pool is None:
        pool = client.get_category_pool(pool_size, min_clues=clues_per_category)
    category_ids = select_categories(pool, category_count, rng=rng)

    categories: List[Category] = []
    for category_id in category_ids:
        category = load_category(category_id, client)
        if len(category.clues) < clues_per_category:
            raise FetchError(
                f"Category {category_id!r} has {len(category.clues)} clues, "
                f"{clues_per_category} needed."
            )
        categories.append(Category.build(category.title, category.clues[:clues_per_category]))

    logger.info(f"Loaded board generation {generation} with {len(categories)} categories")
    return Board(categories=tuple(categories), generation=generation)
