import threading

from django.test import SimpleTestCase

from trivia.board import (
    Board,
    Category,
    Clue,
    FetchError,
    GameRegistry,
    GameSession,
    InvalidReferenceError,
    LoadInProgressError,
    RevealState,
    StaleLoadError,
)


def _board(generation, title="cat"):
    return Board(
        categories=(Category.build(title, [Clue("2+2", "4"), Clue("1+1", "2")]),),
        generation=generation,
    )


class GameSessionTests(SimpleTestCase):
    def test_start_commits_board(self):
        session = GameSession()
        board = session.start(lambda generation: _board(generation))
        self.assertIs(session.board, board)
        self.assertEqual(session.generation, 1)
        self.assertFalse(session.loading)

    def test_restart_replaces_board_entirely(self):
        session = GameSession()
        first = session.start(lambda g: _board(g, "first"))
        session.reveal(first.generation, 0, 0)
        second = session.start(lambda g: _board(g, "second"))
        self.assertIsNot(first, second)
        self.assertEqual(session.board.categories[0].title, "second")
        self.assertIs(session.board.clue_at(0, 0).reveal_state, RevealState.HIDDEN)

    def test_start_refused_while_loading(self):
        session = GameSession()
        session.begin_load()
        with self.assertRaises(LoadInProgressError):
            session.start(lambda g: _board(g))
        self.assertEqual(session.generation, 1)

    def test_superseded_load_is_discarded(self):
        session = GameSession()
        stale = session.begin_load()
        fresh = session.begin_load(supersede=True)
        self.assertTrue(session.complete_load(fresh, _board(fresh, "fresh")))
        self.assertFalse(session.complete_load(stale, _board(stale, "stale")))
        self.assertEqual(session.board.categories[0].title, "fresh")

    def test_late_stale_result_raises_and_keeps_newer_board(self):
        session = GameSession()
        entered = threading.Event()
        release = threading.Event()
        errors = []

        def slow_load(generation):
            entered.set()
            release.wait(5)
            return _board(generation, "slow")

        def run_slow():
            try:
                session.start(slow_load)
            except StaleLoadError as e:
                errors.append(e)

        worker = threading.Thread(target=run_slow)
        worker.start()
        entered.wait(5)
        session.start(lambda g: _board(g, "fast"), supersede=True)
        release.set()
        worker.join(5)

        self.assertEqual(len(errors), 1)
        self.assertEqual(session.board.categories[0].title, "fast")
        self.assertEqual(session.board.generation, 2)

    def test_superseded_load_that_fails_is_stale(self):
        session = GameSession()

        def superseded_then_failing(generation):
            session.begin_load(supersede=True)
            raise FetchError("late failure")

        with self.assertRaises(StaleLoadError) as ctx:
            session.start(superseded_then_failing)
        self.assertEqual((ctx.exception.generation, ctx.exception.current), (1, 2))
        self.assertIsInstance(ctx.exception.__cause__, FetchError)
        self.assertEqual(session.snapshot(), (2, True, None))
        self.assertFalse(session.fail_load(1))

    def test_failed_load_reenables_start(self):
        session = GameSession()

        def failing(generation):
            raise FetchError("down")

        with self.assertRaises(FetchError):
            session.start(failing)
        self.assertFalse(session.loading)
        self.assertIsNone(session.board)
        session.start(lambda g: _board(g))
        self.assertIsNotNone(session.board)

    def test_reveal_through_session(self):
        session = GameSession()
        board = session.start(lambda g: _board(g))
        clue, text = session.reveal(board.generation, 0, 0)
        self.assertEqual(text, "2+2")
        clue, text = session.reveal(board.generation, 0, 0)
        self.assertEqual(text, "4")
        clue, text = session.reveal(board.generation, 0, 0)
        self.assertIsNone(text)
        self.assertIs(clue.reveal_state, RevealState.ANSWER)

    def test_reveal_with_old_generation_is_invalid(self):
        session = GameSession()
        first = session.start(lambda g: _board(g))
        session.start(lambda g: _board(g))
        with self.assertRaises(InvalidReferenceError):
            session.reveal(first.generation, 0, 0)

    def test_reveal_before_any_board_is_invalid(self):
        with self.assertRaises(InvalidReferenceError):
            GameSession().reveal(0, 0, 0)

    def test_snapshot(self):
        session = GameSession()
        self.assertEqual(session.snapshot(), (0, False, None))
        session.begin_load()
        self.assertEqual(session.snapshot(), (1, True, None))


class GameRegistryTests(SimpleTestCase):
    def test_create_and_get(self):
        registry = GameRegistry()
        session = registry.create()
        self.assertIs(registry.get(session.game_id), session)
        self.assertIs(registry.get_or_create(session.game_id), session)

    def test_unknown_game(self):
        with self.assertRaises(KeyError):
            GameRegistry().get("missing")

    def test_oldest_game_evicted(self):
        registry = GameRegistry(max_games=2)
        first = registry.create()
        registry.create()
        registry.create()
        self.assertEqual(len(registry), 2)
        with self.assertRaises(KeyError):
            registry.get(first.game_id)

    def test_max_games_must_be_positive(self):
        with self.assertRaises(ValueError):
            GameRegistry(max_games=0)
