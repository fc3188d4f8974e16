from io import StringIO
from unittest import mock

from django.core.management import CommandError, call_command
from django.db import connections
from django.test import SimpleTestCase, override_settings
from django.urls import reverse
from rest_framework.test import APISimpleTestCase

from trivia.board import FetchError
from trivia.conf import get_registry
from trivia.tests_loader import FakeSource, _source


class SupersededSource(FakeSource):
    """Source whose pool request lets a newer start take over, then fails."""

    def __init__(self, game_id):
        super().__init__({})
        self.game_id = game_id

    def get_category_pool(self, count, min_clues=0):
        get_registry().get(self.game_id).begin_load(supersede=True)
        raise FetchError("late failure")


class GameFlowTests(APISimpleTestCase):
    def setUp(self):
        get_registry().clear()
        self.source = _source(n=20, clue_count=6)
        patcher = mock.patch("trivia.views.get_trivia_client", return_value=self.source)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _start(self, **body):
        return self.client.post(reverse('start-game'), body, format="json")

    def test_health(self):
        resp = self.client.get(reverse('Health'))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "Server is up!"})

    def test_config_defaults(self):
        resp = self.client.get(reverse('board-config'))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"category_count": 6, "clues_per_category": 5, "placeholder": "?"})

    def test_start_game_returns_hidden_grid(self):
        resp = self._start()
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertIn("game_id", data)
        self.assertEqual(data["status"], "READY")
        self.assertEqual(data["generation"], 1)
        self.assertEqual(len(data["categories"]), 6)
        for column, category in enumerate(data["categories"]):
            self.assertEqual(len(category["clues"]), 5)
            for row, cell in enumerate(category["clues"]):
                self.assertEqual((cell["column"], cell["row"]), (column, row))
                self.assertEqual(cell["state"], "hidden")
                self.assertEqual(cell["text"], "?")
        self.assertEqual(data["categories"][0]["header"], data["categories"][0]["title"].upper())
        self.assertTrue(data["categories"][0]["header"].startswith("CATEGORY "))
        self.assertTrue(self.source.closed)

    def test_reveal_question_then_answer_then_nothing(self):
        start = self._start().json()
        body = {"game_id": start["game_id"], "generation": start["generation"], "column": 2, "row": 4}
        clue = get_registry().get(start["game_id"]).board.clue_at(2, 4)

        first = self.client.post(reverse('reveal'), body, format="json").json()
        self.assertEqual((first["state"], first["text"], first["changed"]), ("question", clue.question, True))

        second = self.client.post(reverse('reveal'), body, format="json").json()
        self.assertEqual((second["state"], second["text"], second["changed"]), ("answer", clue.answer, True))

        third = self.client.post(reverse('reveal'), body, format="json").json()
        self.assertEqual((third["state"], third["text"], third["changed"]), ("answer", clue.answer, False))

        detail = self.client.get(reverse('game-detail', kwargs={"game_id": start["game_id"]})).json()
        self.assertEqual(detail["categories"][2]["clues"][4]["text"], clue.answer)
        self.assertEqual(detail["categories"][0]["clues"][0]["text"], "?")

    def test_reveal_off_board(self):
        start = self._start().json()
        body = {"game_id": start["game_id"], "generation": start["generation"], "column": 6, "row": 0}
        resp = self.client.post(reverse('reveal'), body, format="json")
        self.assertEqual(resp.status_code, 404)

    def test_reveal_on_replaced_board(self):
        start = self._start().json()
        restart = self._start(game_id=start["game_id"]).json()
        self.assertEqual(restart["game_id"], start["game_id"])
        self.assertEqual(restart["generation"], 2)
        body = {"game_id": start["game_id"], "generation": 1, "column": 0, "row": 0}
        resp = self.client.post(reverse('reveal'), body, format="json")
        self.assertEqual(resp.status_code, 404)

    def test_reveal_unknown_game(self):
        body = {"game_id": "0" * 32, "generation": 1, "column": 0, "row": 0}
        resp = self.client.post(reverse('reveal'), body, format="json")
        self.assertEqual(resp.status_code, 404)

    def test_reveal_validation(self):
        resp = self.client.post(reverse('reveal'), {"game_id": "nope", "row": -1}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_restart_unknown_game(self):
        resp = self._start(game_id="f" * 32)
        self.assertEqual(resp.status_code, 404)

    def test_start_refused_while_loading(self):
        start = self._start().json()
        get_registry().get(start["game_id"]).begin_load()
        resp = self._start(game_id=start["game_id"])
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["status"], "LOADING")

    def test_supersede_while_loading(self):
        start = self._start().json()
        get_registry().get(start["game_id"]).begin_load()
        resp = self._start(game_id=start["game_id"], supersede=True)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["generation"], 3)

    def test_superseded_load_failing_late_is_conflict(self):
        start = self._start().json()
        game_id = start["game_id"]
        with mock.patch("trivia.views.get_trivia_client", return_value=SupersededSource(game_id)):
            resp = self._start(game_id=game_id)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["status"], "LOADING")
        self.assertEqual(get_registry().get(game_id).snapshot(), (3, True, None))

        detail = self.client.get(reverse('game-detail', kwargs={"game_id": game_id})).json()
        self.assertEqual(detail["status"], "LOADING")

    def test_source_failure_exposes_no_board(self):
        self.source.broken = set(range(20))
        resp = self._start()
        self.assertEqual(resp.status_code, 502)
        game_id = resp.json()["game_id"]
        detail = self.client.get(reverse('game-detail', kwargs={"game_id": game_id})).json()
        self.assertEqual(detail["status"], "IDLE")
        self.assertEqual(detail["categories"], [])

        self.source.broken = set()
        retry = self._start(game_id=game_id)
        self.assertEqual(retry.status_code, 200)

    @override_settings(TRIVIA_BOARD={"CATEGORY_COUNT": 25})
    def test_small_pool_is_bad_gateway(self):
        resp = self._start()
        self.assertEqual(resp.status_code, 502)

    @override_settings(TRIVIA_BOARD={"CATEGORY_COUNT": 3, "CLUES_PER_CATEGORY": 2, "PLACEHOLDER": "$"})
    def test_configured_dimensions(self):
        data = self._start().json()
        self.assertEqual((data["category_count"], data["clues_per_category"]), (3, 2))
        self.assertEqual(len(data["categories"]), 3)
        self.assertEqual(data["categories"][0]["clues"][0]["text"], "$")


class CheckTriviaSourceCommandTests(SimpleTestCase):
    def test_reports_pool_and_loads_board(self):
        out = StringIO()
        with mock.patch(
            "trivia.management.commands.check_trivia_source.get_trivia_client",
            return_value=_source(n=8),
        ):
            call_command("check_trivia_source", "--load", stdout=out)
        output = out.getvalue()
        self.assertIn("8 usable categories available.", output)
        self.assertIn("Loaded 6 categories.", output)
        self.assertIn("- CATEGORY ", output)

    def test_unreachable_source(self):
        client = mock.MagicMock()
        client.__enter__.return_value = client
        client.__exit__.return_value = False
        client.get_category_pool.side_effect = FetchError("down")
        with mock.patch(
            "trivia.management.commands.check_trivia_source.get_trivia_client",
            return_value=client,
        ):
            with self.assertRaises(CommandError):
                call_command("check_trivia_source", stdout=StringIO())
        client.__exit__.assert_called_once()


class BoardSettingsTests(SimpleTestCase):
    def test_registry_follows_max_games_override(self):
        self.assertEqual(get_registry().max_games, 1000)
        with self.settings(TRIVIA_BOARD={"MAX_GAMES": 2}):
            registry = get_registry()
            self.assertEqual(registry.max_games, 2)
            for _ in range(3):
                registry.create()
            self.assertEqual(len(registry), 2)
        self.assertEqual(get_registry().max_games, 1000)

    def test_runs_without_a_database(self):
        self.assertEqual(connections["default"].settings_dict["ENGINE"], "django.db.backends.dummy")
