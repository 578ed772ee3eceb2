from __future__ import annotations

from typing import Optional

from .game_state import GameState
from .llm_play import MoveDecision
from .notation import algebraic_to_coord
from .othello import Coord


class HumanOpponent:
    """Player whose moves come from an external controller (web UI).

    The web layer calls provide_move(text) when the human submits a move.
    Until then, choose() raises if invoked without a pending move.
    """
    name = "Human"

    def __init__(self, size: int = 8):
        self.size = size
        self._pending: Optional[Coord] = None
        self._pending_raw: Optional[str] = None

    def provide_move(self, text: str) -> Optional[Coord]:
        """Queue a move given in algebraic notation; returns None if it cannot be parsed."""
        coord = algebraic_to_coord(text, self.size)
        if coord is None:
            return None
        self._pending = coord
        self._pending_raw = text
        return coord

    def has_pending(self) -> bool:
        return self._pending is not None

    def choose(self, state: GameState) -> MoveDecision:
        if self._pending is None:
            raise RuntimeError("Human move not yet provided")
        coord, raw = self._pending, self._pending_raw
        self._pending = None
        self._pending_raw = None
        return MoveDecision(coord=coord, source="human", meta={"raw": raw})

    def close(self):
        pass
