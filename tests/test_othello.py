import random
import unittest

from llmothello.othello import (
    BLACK,
    WHITE,
    Coord,
    apply_move,
    board_from_rows,
    can_play,
    empty_board,
    flips_for,
    initial_board,
    is_game_over,
    opponent,
    score,
    valid_moves,
)


def _random_positions(seed: int, count: int = 40):
    """Yield (board, player) pairs reached by random legal play from the opening."""
    rng = random.Random(seed)
    board, player = initial_board(), BLACK
    for _ in range(count):
        yield board, player
        moves = valid_moves(board, player)
        if not moves:
            player = opponent(player)
            if not valid_moves(board, player):
                return
            continue
        board = apply_move(board, player, rng.choice(moves))
        player = opponent(player)


class BoardModelTests(unittest.TestCase):
    def test_empty_board_is_square_and_empty(self):
        b = empty_board(6)
        self.assertEqual(len(b), 6)
        self.assertTrue(all(len(row) == 6 for row in b))
        self.assertTrue(all(cell is None for row in b for cell in row))

    def test_empty_board_rejects_non_positive_size(self):
        with self.assertRaises(ValueError):
            empty_board(0)

    def test_initial_board_center_cross(self):
        b = initial_board()
        self.assertEqual(b[3][3], WHITE)
        self.assertEqual(b[4][4], WHITE)
        self.assertEqual(b[3][4], BLACK)
        self.assertEqual(b[4][3], BLACK)
        self.assertEqual(score(b), (2, 2))

    def test_initial_board_small_size(self):
        b = initial_board(4)
        self.assertEqual(b[1][1], WHITE)
        self.assertEqual(b[2][2], WHITE)
        self.assertEqual(b[1][2], BLACK)
        self.assertEqual(b[2][1], BLACK)

    def test_initial_board_rejects_odd_size(self):
        with self.assertRaises(ValueError):
            initial_board(7)

    def test_board_from_rows(self):
        b = board_from_rows(["B.", ".W"])
        self.assertEqual(b, ((BLACK, None), (None, WHITE)))
        with self.assertRaises(ValueError):
            board_from_rows(["B..", ".W"])
        with self.assertRaises(ValueError):
            board_from_rows(["BX", ".."])


class LegalityTests(unittest.TestCase):
    def test_opening_moves_for_black(self):
        moves = valid_moves(initial_board(), BLACK)
        self.assertEqual(moves, [Coord(2, 3), Coord(3, 2), Coord(4, 5), Coord(5, 4)])

    def test_flips_single_line(self):
        self.assertEqual(flips_for(initial_board(), BLACK, Coord(2, 3)), [Coord(3, 3)])

    def test_occupied_and_out_of_bounds_have_no_flips(self):
        b = initial_board()
        self.assertEqual(flips_for(b, BLACK, Coord(3, 3)), [])
        self.assertEqual(flips_for(b, BLACK, Coord(-1, 0)), [])
        self.assertEqual(flips_for(b, BLACK, Coord(8, 8)), [])
        self.assertFalse(can_play(b, BLACK, Coord(0, 0)))

    def test_unbracketed_line_is_not_captured(self):
        b = board_from_rows([".WW.", "....", "....", "...."])
        self.assertEqual(flips_for(b, BLACK, Coord(0, 0)), [])

    def test_multiple_directions_are_concatenated(self):
        b = board_from_rows([
            "B.B.",
            "WW..",
            ".W..",
            ".B..",
        ])
        # From (2,0): up captures (1,0); up-right captures (1,1); right runs to (2,1) then empty.
        flips = flips_for(b, BLACK, Coord(2, 0))
        self.assertEqual(flips, [Coord(1, 0), Coord(1, 1)])

    def test_valid_moves_matches_can_play_everywhere(self):
        for seed in range(5):
            for board, player in _random_positions(seed):
                moves = set(valid_moves(board, player))
                n = len(board)
                for r in range(n):
                    for c in range(n):
                        self.assertEqual(Coord(r, c) in moves, can_play(board, player, Coord(r, c)))

    def test_valid_moves_row_major(self):
        for board, player in _random_positions(11):
            moves = valid_moves(board, player)
            self.assertEqual(moves, sorted(moves))


class ApplyMoveTests(unittest.TestCase):
    def test_apply_move_is_pure(self):
        b = initial_board()
        nb = apply_move(b, BLACK, Coord(2, 3))
        self.assertEqual(b, initial_board())
        self.assertEqual(nb[2][3], BLACK)
        self.assertEqual(nb[3][3], BLACK)
        self.assertEqual(score(nb), (4, 1))

    def test_illegal_move_returns_same_board(self):
        b = initial_board()
        self.assertIs(apply_move(b, BLACK, Coord(0, 0)), b)

    def test_conservation_and_occupied_after_apply(self):
        for seed in range(5):
            for board, player in _random_positions(seed):
                for move in valid_moves(board, player):
                    flips = flips_for(board, player, move)
                    nb = apply_move(board, player, move)
                    before = sum(score(board))
                    after = sum(score(nb))
                    self.assertEqual(after, before + 1)
                    mover_before = score(board)[0 if player == BLACK else 1]
                    mover_after = score(nb)[0 if player == BLACK else 1]
                    self.assertEqual(mover_after, mover_before + 1 + len(flips))
                    self.assertFalse(can_play(nb, player, move))
                    self.assertFalse(can_play(nb, opponent(player), move))


class GameOverTests(unittest.TestCase):
    def test_opening_is_not_over(self):
        self.assertFalse(is_game_over(initial_board()))

    def test_no_moves_for_either_side(self):
        b = board_from_rows(["B..W", "....", "....", "...."])
        self.assertTrue(is_game_over(b))

    def test_full_board_is_over(self):
        b = board_from_rows(["BBWW", "BBWW", "WWBB", "WWBB"])
        self.assertTrue(is_game_over(b))
        self.assertEqual(score(b), (8, 8))


if __name__ == "__main__":
    unittest.main()
