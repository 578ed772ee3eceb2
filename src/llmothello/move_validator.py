"""
Move parsing/validation helpers for free-form proposal replies (LLM or other text source).

sanitize_move() accepts loose formatting but only legal moves:
- strip ``` fences, uppercase, drop every character that is not a board letter or digit;
- take the first letter+row occurrence that lies on the board;
- accept it only if it is in the current legal-move set.
"""
from __future__ import annotations

from typing import Optional, TypedDict

from .notation import coord_to_algebraic
from .othello import LETTERS, Board, Coord, Player, valid_moves

DIGITS = "0123456789"


class ParsedMove(TypedDict, total=False):
    ok: bool
    algebraic: str
    coord: Coord
    reason: str
    candidate: str


def _strip_code_fence(text: str) -> str:
    """Remove simple ``` fences if present."""
    text = text.strip()
    if text.startswith("```") and text.endswith("```"):
        inner = text.split("\n", 1)
        if len(inner) == 2:
            return inner[1].rsplit("\n", 1)[0].strip()
        return text.strip("`").strip()
    return text


def _cleaned(raw: str, size: int) -> str:
    letters = LETTERS[:size]
    upper = _strip_code_fence(raw).upper()
    return "".join(ch for ch in upper if ch in letters or ch in DIGITS)


def extract_coordinate(raw: str, size: int = 8) -> Optional[Coord]:
    """First on-board letter+row pair in the cleaned text, or None."""
    text = _cleaned(raw or "", size)
    letters = LETTERS[:size]
    for i, ch in enumerate(text):
        if ch not in letters:
            continue
        # prefer a two-digit row on boards that have one (J10), else one digit
        if size >= 10:
            two = text[i + 1:i + 3]
            if len(two) == 2 and two.isdigit() and two[0] != "0" and 1 <= int(two) <= size:
                return Coord(int(two) - 1, letters.index(ch))
        one = text[i + 1:i + 2]
        if one.isdigit() and 1 <= int(one) <= size:
            return Coord(int(one) - 1, letters.index(ch))
    return None


def sanitize_move(board: Board, current: Player, raw: str) -> ParsedMove:
    """Turn a raw reply into a legal coordinate for `current`, or ok=False with a reason."""
    text = (raw or "").strip()
    if not text:
        return {"ok": False, "reason": "empty_reply"}
    if _strip_code_fence(text).strip().strip(".").upper() == "PASS":
        return {"ok": False, "reason": "pass"}
    coord = extract_coordinate(text, len(board))
    if coord is None:
        return {"ok": False, "reason": "no_coordinate"}
    alg = coord_to_algebraic(coord)
    if coord not in valid_moves(board, current):
        return {"ok": False, "reason": "illegal_move", "candidate": alg}
    return {"ok": True, "algebraic": alg, "coord": coord}


__all__ = [
    "ParsedMove",
    "extract_coordinate",
    "sanitize_move",
]
