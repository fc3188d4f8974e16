import random
from unittest import mock

import requests
from django.test import SimpleTestCase

from trivia.board import (
    FetchError,
    InsufficientPoolError,
    RevealState,
    TriviaClient,
    load_board,
    load_category,
)


class FakeSource:
    """In-memory stand-in for TriviaClient."""

    def __init__(self, categories, broken=()):
        self.categories = categories
        self.broken = set(broken)
        self.requested = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True

    def get_category_pool(self, count, min_clues=0):
        return list(self.categories)[:count]

    def get_category(self, category_id):
        self.requested.append(category_id)
        if category_id in self.broken:
            return {"id": category_id, "title": "broken"}
        return self.categories[category_id]


def _category(category_id, clue_count=5):
    return {
        "id": category_id,
        "title": f"Category {category_id}",
        "clues": [
            {"question": f"Q{category_id}.{i}", "answer": f"A{category_id}.{i}", "value": 200 * (i + 1)}
            for i in range(clue_count)
        ],
    }


def _source(n=10, clue_count=5, broken=()):
    return FakeSource({i: _category(i, clue_count) for i in range(n)}, broken=broken)


class LoadCategoryTests(SimpleTestCase):
    def test_keeps_title_and_full_clue_list_in_order(self):
        category = load_category(3, _source(clue_count=8))
        self.assertEqual(category.title, "Category 3")
        self.assertEqual(len(category.clues), 8)
        self.assertEqual([c.question for c in category.clues[:2]], ["Q3.0", "Q3.1"])
        self.assertTrue(all(c.reveal_state is RevealState.HIDDEN for c in category.clues))

    def test_missing_clues_is_fetch_error(self):
        with self.assertRaises(FetchError):
            load_category(1, _source(broken=[1]))

    def test_clue_without_answer_is_fetch_error(self):
        source = FakeSource({1: {"title": "x", "clues": [{"question": "q"}]}})
        with self.assertRaises(FetchError):
            load_category(1, source)


class LoadBoardTests(SimpleTestCase):
    def test_board_dimensions_and_hidden_clues(self):
        board = load_board(6, pool=list(range(10)), client=_source(clue_count=7), rng=random.Random(1))
        self.assertEqual(board.category_count, 6)
        for category in board.categories:
            self.assertEqual(len(category.clues), 5)
            self.assertTrue(all(c.reveal_state is RevealState.HIDDEN for c in category.clues))

    def test_categories_loaded_in_selection_order(self):
        source = _source()
        board = load_board(4, pool=list(range(10)), client=source, rng=random.Random(3))
        self.assertEqual([c.title for c in board.categories], [f"Category {i}" for i in source.requested])

    def test_pool_fetched_from_source_when_not_given(self):
        board = load_board(3, client=_source(n=3), clues_per_category=2, generation=4)
        self.assertEqual(board.category_count, 3)
        self.assertEqual(board.clues_per_category, 2)
        self.assertEqual(board.generation, 4)

    def test_single_failure_aborts_whole_load(self):
        source = _source(n=6, broken=[2])
        with self.assertRaises(FetchError):
            load_board(6, pool=list(range(6)), client=source)

    def test_short_category_is_fetch_error(self):
        with self.assertRaises(FetchError):
            load_board(2, pool=[0, 1], client=_source(n=2, clue_count=3))

    def test_small_pool(self):
        with self.assertRaises(InsufficientPoolError):
            load_board(6, pool=[1, 2, 3], client=_source())


def _response(payload=None, status_error=None, json_error=None):
    response = mock.Mock()
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


class TriviaClientTests(SimpleTestCase):
    def _client(self, response=None, side_effect=None):
        session = mock.Mock(spec=requests.Session)
        session.get.return_value = response
        if side_effect is not None:
            session.get.side_effect = side_effect
        return TriviaClient(base_url="http://trivia.test/api/", timeout=2.5, session=session), session

    def test_category_pool_returns_ids(self):
        payload = [
            {"id": 11, "title": "a", "clues_count": 5},
            {"id": 12, "title": "b", "clues_count": 2},
            {"id": 13, "title": "c", "clues_count": 9},
        ]
        client, session = self._client(_response(payload))
        self.assertEqual(client.get_category_pool(100, min_clues=5), [11, 13])
        session.get.assert_called_once_with(
            "http://trivia.test/api/categories", params={"count": 100}, timeout=2.5
        )

    def test_category_request(self):
        client, session = self._client(_response(_category(7)))
        self.assertEqual(client.get_category(7)["title"], "Category 7")
        session.get.assert_called_once_with(
            "http://trivia.test/api/category", params={"id": 7}, timeout=2.5
        )

    def test_connection_error_is_fetch_error(self):
        client, _ = self._client(side_effect=requests.ConnectionError("down"))
        with self.assertRaises(FetchError) as ctx:
            client.get_category(1)
        self.assertIsInstance(ctx.exception.__cause__, requests.ConnectionError)

    def test_http_error_is_fetch_error(self):
        client, _ = self._client(_response(status_error=requests.HTTPError("500")))
        with self.assertRaises(FetchError):
            client.get_category_pool(10)

    def test_invalid_json_is_fetch_error(self):
        client, _ = self._client(_response(json_error=ValueError("no json")))
        with self.assertRaises(FetchError):
            client.get_category(1)

    def test_unexpected_shapes_are_fetch_errors(self):
        client, _ = self._client(_response({"not": "a list"}))
        with self.assertRaises(FetchError):
            client.get_category_pool(10)
        client, _ = self._client(_response([1, 2]))
        with self.assertRaises(FetchError):
            client.get_category(1)

    def test_context_manager_closes_session(self):
        client, session = self._client(_response(_category(2)))
        with client as entered:
            self.assertIs(entered, client)
            entered.get_category(2)
        session.close.assert_called_once_with()
