import unittest

from llmothello.move_validator import extract_coordinate, sanitize_move
from llmothello.othello import BLACK, WHITE, Coord, initial_board


class SanitizeMoveTests(unittest.TestCase):
    def setUp(self):
        self.board = initial_board()

    def test_banana_is_not_usable(self):
        parsed = sanitize_move(self.board, BLACK, "banana")
        self.assertFalse(parsed["ok"])
        self.assertEqual(parsed["reason"], "no_coordinate")

    def test_lowercase_legal_move_accepted(self):
        parsed = sanitize_move(self.board, BLACK, "d3")
        self.assertTrue(parsed["ok"])
        self.assertEqual(parsed["coord"], Coord(2, 3))
        self.assertEqual(parsed["algebraic"], "D3")

    def test_move_buried_in_chatter(self):
        parsed = sanitize_move(self.board, BLACK, "My move: **F5**.")
        self.assertTrue(parsed["ok"])
        self.assertEqual(parsed["algebraic"], "F5")

    def test_code_fence_is_stripped(self):
        parsed = sanitize_move(self.board, BLACK, "```\nE6\n```")
        self.assertTrue(parsed["ok"])
        self.assertEqual(parsed["coord"], Coord(5, 4))

    def test_on_board_but_illegal(self):
        parsed = sanitize_move(self.board, BLACK, "A1")
        self.assertFalse(parsed["ok"])
        self.assertEqual(parsed["reason"], "illegal_move")
        self.assertEqual(parsed["candidate"], "A1")

    def test_legality_depends_on_player(self):
        self.assertFalse(sanitize_move(self.board, WHITE, "D3")["ok"])
        self.assertTrue(sanitize_move(self.board, WHITE, "E3")["ok"])

    def test_pass_and_empty(self):
        self.assertEqual(sanitize_move(self.board, BLACK, "PASS")["reason"], "pass")
        self.assertEqual(sanitize_move(self.board, BLACK, "pass.")["reason"], "pass")
        self.assertEqual(sanitize_move(self.board, BLACK, "   ")["reason"], "empty_reply")

    def test_non_ascii_digits_are_not_rows(self):
        self.assertEqual(sanitize_move(self.board, BLACK, "D²"), {"ok": False, "reason": "no_coordinate"})
        self.assertEqual(sanitize_move(self.board, BLACK, "C①")["reason"], "no_coordinate")
        self.assertEqual(sanitize_move(self.board, BLACK, "E³ then F5")["coord"], Coord(4, 5))


class ExtractCoordinateTests(unittest.TestCase):
    def test_out_of_range_digits_are_skipped(self):
        # Z is off the board and the stray 9 cannot start a coordinate
        self.assertEqual(extract_coordinate("Z9 D3"), Coord(2, 3))

    def test_first_match_wins(self):
        self.assertEqual(extract_coordinate("C4 or F5"), Coord(3, 2))

    def test_two_digit_rows_on_large_boards(self):
        self.assertEqual(extract_coordinate("j10", size=10), Coord(9, 9))
        self.assertEqual(extract_coordinate("A1", size=10), Coord(0, 0))

    def test_nothing_found(self):
        self.assertIsNone(extract_coordinate(""))
        self.assertIsNone(extract_coordinate("no move here"))


if __name__ == "__main__":
    unittest.main()
