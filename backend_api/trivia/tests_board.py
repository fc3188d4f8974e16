import random

from django.test import SimpleTestCase

from trivia.board import (
    Board,
    Category,
    Clue,
    InsufficientPoolError,
    InvalidReferenceError,
    RevealState,
    get_display_text,
    reveal,
    select_categories,
)


def _board(columns=2, rows=3, generation=1):
    return Board(
        categories=tuple(
            Category.build(f"cat{c}", [Clue(f"q{c}{r}", f"a{c}{r}") for r in range(rows)])
            for c in range(columns)
        ),
        generation=generation,
    )


class RevealTests(SimpleTestCase):
    def test_new_clue_is_hidden(self):
        clue = Clue(question="2+2", answer="4")
        self.assertIs(clue.reveal_state, RevealState.HIDDEN)
        self.assertEqual(get_display_text(clue), "?")

    def test_reveal_walks_question_then_answer(self):
        clue = Clue(question="2+2", answer="4")

        self.assertEqual(reveal(clue), "2+2")
        self.assertIs(clue.reveal_state, RevealState.QUESTION)
        self.assertEqual(get_display_text(clue), "2+2")

        self.assertEqual(reveal(clue), "4")
        self.assertIs(clue.reveal_state, RevealState.ANSWER)
        self.assertEqual(get_display_text(clue), "4")

        self.assertIsNone(reveal(clue))
        self.assertIs(clue.reveal_state, RevealState.ANSWER)
        self.assertEqual(get_display_text(clue), "4")

    def test_answer_is_terminal_under_repeated_clicks(self):
        clue = Clue(question="Hamlet author", answer="Shakespeare")
        for _ in range(10):
            reveal(clue)
        self.assertIs(clue.reveal_state, RevealState.ANSWER)
        self.assertEqual(get_display_text(clue), "Shakespeare")

    def test_clues_are_independent(self):
        first = Clue("q1", "a1")
        second = Clue("q2", "a2")
        reveal(first)
        reveal(first)
        self.assertIs(first.reveal_state, RevealState.ANSWER)
        self.assertIs(second.reveal_state, RevealState.HIDDEN)

    def test_reveal_without_clue_is_invalid_reference(self):
        with self.assertRaises(InvalidReferenceError):
            reveal(None)

    def test_custom_placeholder(self):
        self.assertEqual(get_display_text(Clue("q", "a"), placeholder="$200"), "$200")

    def test_numeric_answer_is_text(self):
        clue = Clue(question="1+1", answer=2)
        self.assertEqual(clue.answer, "2")

    def test_question_and_answer_are_read_only(self):
        clue = Clue("q", "a")
        with self.assertRaises(AttributeError):
            clue.answer = "b"
        with self.assertRaises(AttributeError):
            clue.question = "p"


class BoardTests(SimpleTestCase):
    def test_dimensions(self):
        board = _board(columns=6, rows=5)
        self.assertEqual(board.category_count, 6)
        self.assertEqual(board.clues_per_category, 5)

    def test_clue_at_resolves_column_then_row(self):
        board = _board()
        self.assertEqual(board.clue_at(1, 2).question, "q12")

    def test_clue_at_out_of_range(self):
        board = _board(columns=2, rows=3)
        for column, row in [(2, 0), (0, 3), (-1, 0), (0, -1)]:
            with self.assertRaises(InvalidReferenceError):
                board.clue_at(column, row)

    def test_board_is_fixed_size(self):
        board = _board()
        self.assertIsInstance(board.categories, tuple)
        self.assertIsInstance(board.categories[0].clues, tuple)


class SelectCategoriesTests(SimpleTestCase):
    def test_picks_distinct_members_of_pool(self):
        pool = list(range(100))
        chosen = select_categories(pool, 6, rng=random.Random(7))
        self.assertEqual(len(chosen), 6)
        self.assertEqual(len(set(chosen)), 6)
        self.assertTrue(set(chosen) <= set(pool))

    def test_exact_pool_size_returns_everything(self):
        chosen = select_categories([3, 1, 2], 3)
        self.assertCountEqual(chosen, [1, 2, 3])

    def test_duplicates_do_not_count_twice(self):
        with self.assertRaises(InsufficientPoolError):
            select_categories([1, 1, 2], 3)

    def test_pool_too_small(self):
        with self.assertRaises(InsufficientPoolError) as ctx:
            select_categories([1, 2], 6)
        self.assertEqual(ctx.exception.available, 2)
        self.assertEqual(ctx.exception.requested, 6)

    def test_negative_count_rejected(self):
        with self.assertRaises(ValueError):
            select_categories([1, 2], -1)
