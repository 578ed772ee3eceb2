"""Algebraic notation: column letter + 1-indexed row, e.g. Coord(r=2, c=3) <-> "D3"."""
from __future__ import annotations

import re
from typing import Optional

from .othello import LETTERS, MAX_SIZE, Coord

ALGEBRAIC_RE = re.compile(r"^([A-Z])([1-9]\d?)$")


def coord_to_algebraic(coord: Coord) -> str:
    r, c = coord
    if r < 0 or c < 0 or c >= MAX_SIZE:
        raise ValueError(f"Coordinate {tuple(coord)} has no algebraic name")
    return f"{LETTERS[c]}{r + 1}"


def algebraic_to_coord(text: str, size: int = 8) -> Optional[Coord]:
    """Parse "d3" / " D3 " into a Coord on a `size` board; None if malformed or out of range."""
    if not isinstance(text, str):
        return None
    m = ALGEBRAIC_RE.match(text.strip().upper())
    if not m:
        return None
    c = LETTERS.index(m.group(1))
    r = int(m.group(2)) - 1
    if c >= size or not 0 <= r < size:
        return None
    return Coord(r, c)
