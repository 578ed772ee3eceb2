import unittest

from llmothello.game_state import (
    DRAW,
    GameState,
    initial_state,
    is_terminal,
    legal_moves,
    play,
    reset,
    scores,
    set_ai_thinking,
    winner_of,
)
from llmothello.notation import coord_to_algebraic
from llmothello.othello import BLACK, WHITE, Coord, board_from_rows, initial_board

# Black can play C1 (capturing B1); afterwards White has no disc it can use, but Black
# can still capture G8 from F8.
PASS_ROWS = [
    "BW......",
    "........",
    "........",
    "........",
    "........",
    "........",
    "........",
    "......WB",
]


class InitialStateTests(unittest.TestCase):
    def test_initial_state(self):
        s = initial_state()
        self.assertEqual(s.board, initial_board())
        self.assertEqual(s.current, BLACK)
        self.assertEqual(s.mode, "PVP")
        self.assertIsNone(s.winner)
        self.assertIsNone(s.last_move)
        self.assertFalse(s.ai_thinking)

    def test_opening_legal_moves(self):
        moves = sorted(coord_to_algebraic(c) for c in legal_moves(initial_state()))
        self.assertEqual(moves, sorted(["D3", "C4", "F5", "E6"]))

    def test_unknown_mode_rejected(self):
        with self.assertRaises(ValueError):
            initial_state("SOLO")  # type: ignore[arg-type]


class PlayTests(unittest.TestCase):
    def test_single_capture_hands_turn_to_white(self):
        s = initial_state()
        res = play(s, Coord(2, 3))
        self.assertTrue(res.ok)
        self.assertEqual(res.flips, (Coord(3, 3),))
        self.assertIsNone(res.passed)
        self.assertEqual(res.state.current, WHITE)
        self.assertEqual(res.state.last_move, Coord(2, 3))
        self.assertEqual(scores(res.state), (4, 1))
        # the earlier snapshot is untouched
        self.assertEqual(s.board, initial_board())
        self.assertEqual(s.current, BLACK)

    def test_illegal_move_rejected_without_change(self):
        s = initial_state()
        res = play(s, Coord(0, 0))
        self.assertFalse(res.ok)
        self.assertEqual(res.reason, "illegal_move")
        self.assertIs(res.state, s)

    def test_occupied_cell_rejected(self):
        s = initial_state()
        res = play(s, Coord(3, 3))
        self.assertFalse(res.ok)
        self.assertEqual(res.reason, "illegal_move")

    def test_forced_pass_keeps_turn(self):
        s = GameState(board=board_from_rows(PASS_ROWS), current=BLACK)
        res = play(s, Coord(0, 2))
        self.assertTrue(res.ok)
        self.assertEqual(res.passed, WHITE)
        self.assertEqual(res.state.current, BLACK)
        self.assertIsNone(res.state.winner)
        self.assertEqual([coord_to_algebraic(c) for c in legal_moves(res.state)], ["F8"])

    def test_terminal_by_majority(self):
        s = GameState(board=board_from_rows(PASS_ROWS), current=BLACK)
        s = play(s, Coord(0, 2)).state
        res = play(s, Coord(7, 5))
        self.assertTrue(res.ok)
        self.assertEqual(res.state.winner, BLACK)
        self.assertTrue(is_terminal(res.state))
        self.assertEqual(legal_moves(res.state), [])

    def test_terminal_draw(self):
        board = board_from_rows(["BW..", "....", "....", "WWW."])
        res = play(GameState(board=board, current=BLACK), Coord(0, 2))
        self.assertTrue(res.ok)
        self.assertEqual(scores(res.state), (3, 3))
        self.assertEqual(res.state.winner, DRAW)

    def test_terminal_is_absorbing(self):
        board = board_from_rows(["BW..", "....", "....", "WWW."])
        done = play(GameState(board=board, current=BLACK), Coord(0, 2)).state
        res = play(done, Coord(0, 3))
        self.assertFalse(res.ok)
        self.assertEqual(res.reason, "game_over")
        self.assertIs(res.state, done)

    def test_reset_clears_everything(self):
        s = play(initial_state("PV_AI"), Coord(2, 3)).state
        s = set_ai_thinking(s, True)
        fresh = reset("PVP")
        self.assertEqual(fresh.mode, "PVP")
        self.assertEqual(fresh.board, initial_board())
        self.assertEqual(fresh.current, BLACK)
        self.assertIsNone(fresh.last_move)
        self.assertIsNone(fresh.winner)
        self.assertFalse(fresh.ai_thinking)
        self.assertTrue(s.ai_thinking)


class WinnerTests(unittest.TestCase):
    def test_winner_of(self):
        self.assertEqual(winner_of(board_from_rows(["BB", "BW"])), BLACK)
        self.assertEqual(winner_of(board_from_rows(["WW", "BW"])), WHITE)
        self.assertEqual(winner_of(board_from_rows(["BW", ".."])), DRAW)


if __name__ == "__main__":
    unittest.main()
