"""Interactive console player that only allows legal moves."""
from __future__ import annotations

from typing import Callable

from .game_state import GameState, legal_moves
from .llm_play import MoveDecision
from .notation import algebraic_to_coord, coord_to_algebraic
from .prompting import board_to_ascii


class UserOpponent:
    name = "Human"

    def __init__(self, input_fn: Callable[[str], str] = input, output_fn: Callable[..., None] = print):
        self._input = input_fn
        self._print = output_fn

    def choose(self, state: GameState) -> MoveDecision:
        """Prompt the user for a legal move; repeat until valid."""
        legal = legal_moves(state)
        if not legal:
            return MoveDecision(coord=None, source="pass")
        while True:
            self._print()
            self._print(board_to_ascii(state.board, state.current))
            self._print("Legal moves:", ", ".join(coord_to_algebraic(c) for c in legal))
            raw = self._input("Enter your move (e.g. D3): ").strip()
            if not raw:
                continue
            coord = algebraic_to_coord(raw, state.size)
            if coord is not None and coord in legal:
                return MoveDecision(coord=coord, source="human", meta={"raw": raw})
            self._print("Illegal move. Please try again with a legal move.")

    def close(self):
        return
