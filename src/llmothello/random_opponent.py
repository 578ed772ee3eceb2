"""
RandomOpponent: picks a uniformly random legal move.

- Useful as a fast, low-difficulty baseline and for exercising the game flow without API calls.
- choose() samples from the legal moves of the side to move; close() is a no-op.
"""
from __future__ import annotations

import random

from .game_state import GameState, legal_moves
from .llm_play import MoveDecision


class RandomOpponent:
    name: str = "Random"

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def choose(self, state: GameState) -> MoveDecision:
        legal = legal_moves(state)
        if not legal:
            return MoveDecision(coord=None, source="pass")
        return MoveDecision(coord=self.rng.choice(legal), source="random")

    def close(self):
        pass
