"""
Turn and game-flow controller.

GameState is an immutable value; every transition (play, reset, set_ai_thinking)
returns a new one so callers own their state explicitly and older snapshots stay valid.

play() is the only way a move reaches the board:
- rejected (ok=False) when the game is over or the move is not legal for the side to move;
- otherwise the move is applied, then the game either ends (winner by disc majority,
  DRAW on a tie), passes to the opponent, or stays with the mover when the opponent
  has no legal move (forced pass, reported via PlayResult.passed).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Literal, Optional, Tuple, Union

from .othello import (
    BLACK,
    WHITE,
    Board,
    Coord,
    Player,
    apply_move,
    flips_for,
    has_valid_move,
    initial_board,
    is_game_over,
    next_player,
    score,
    valid_moves,
)

log = logging.getLogger("game_state")

GameMode = Literal["PVP", "PV_AI"]
Winner = Union[Player, Literal["DRAW"]]
DRAW: Winner = "DRAW"
GAME_MODES: Tuple[str, ...] = ("PVP", "PV_AI")


@dataclass(frozen=True)
class GameState:
    board: Board
    current: Player
    mode: GameMode = "PVP"
    winner: Optional[Winner] = None
    last_move: Optional[Coord] = None
    # Advisory only: set while an AI move proposal is outstanding.
    ai_thinking: bool = False

    @property
    def size(self) -> int:
        return len(self.board)


@dataclass(frozen=True)
class PlayResult:
    ok: bool
    state: GameState
    reason: Optional[str] = None
    flips: Tuple[Coord, ...] = ()
    passed: Optional[Player] = None


def initial_state(mode: GameMode = "PVP", size: int = 8) -> GameState:
    if mode not in GAME_MODES:
        raise ValueError(f"Unknown game mode {mode!r}; expected one of {GAME_MODES}")
    return GameState(board=initial_board(size), current=BLACK, mode=mode)


def reset(mode: GameMode = "PVP", size: int = 8) -> GameState:
    """Fresh game in the chosen mode; winner, last move and the thinking flag are cleared."""
    return initial_state(mode, size)


def set_ai_thinking(state: GameState, thinking: bool) -> GameState:
    return replace(state, ai_thinking=bool(thinking))


def winner_of(board: Board) -> Winner:
    black, white = score(board)
    if black == white:
        return DRAW
    return BLACK if black > white else WHITE


def is_terminal(state: GameState) -> bool:
    return state.winner is not None


def legal_moves(state: GameState) -> List[Coord]:
    if is_terminal(state):
        return []
    return valid_moves(state.board, state.current)


def scores(state: GameState) -> Tuple[int, int]:
    return score(state.board)


def play(state: GameState, move: Coord) -> PlayResult:
    if is_terminal(state):
        return PlayResult(ok=False, state=state, reason="game_over")
    move = Coord(*move)
    flips = flips_for(state.board, state.current, move)
    if not flips:
        return PlayResult(ok=False, state=state, reason="illegal_move")

    board = apply_move(state.board, state.current, move)
    if is_game_over(board):
        winner = winner_of(board)
        black, white = score(board)
        log.info("Game over: winner=%s score B=%d W=%d", winner, black, white)
        new_state = replace(state, board=board, last_move=move, winner=winner)
        return PlayResult(ok=True, state=new_state, flips=tuple(flips))

    opp = next_player(state.current)
    if has_valid_move(board, opp):
        new_state = replace(state, board=board, last_move=move, current=opp)
        return PlayResult(ok=True, state=new_state, flips=tuple(flips))

    log.info("%s has no legal move; turn stays with %s", opp, state.current)
    new_state = replace(state, board=board, last_move=move)
    return PlayResult(ok=True, state=new_state, flips=tuple(flips), passed=opp)
