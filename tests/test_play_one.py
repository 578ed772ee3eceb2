import argparse
import unittest

from play_one import board_size


class BoardSizeArgTests(unittest.TestCase):
    def test_even_sizes_accepted(self):
        self.assertEqual(board_size("8"), 8)
        self.assertEqual(board_size("4"), 4)
        self.assertEqual(board_size("26"), 26)

    def test_bad_sizes_rejected(self):
        for text in ("7", "2", "28", "-8", "eight"):
            with self.assertRaises(argparse.ArgumentTypeError, msg=text):
                board_size(text)


if __name__ == "__main__":
    unittest.main()
