"""
Shared helpers for turning move proposals into decisions.

These keep LLMOpponent, the other opponents and GameRunner symmetric: every move
source returns a MoveDecision, and every raw LLM reply goes through
process_proposal() for validation against the current board.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .llm_client import Proposal
from .move_validator import ParsedMove, sanitize_move
from .othello import Board, Coord, Player


@dataclass
class MoveDecision:
    """A move chosen by some source; coord is None when the source has nothing to play."""

    coord: Optional[Coord]
    source: str
    meta: Dict[str, Any] = field(default_factory=dict)


def process_proposal(
    proposal: Proposal,
    board: Board,
    current: Player,
    log: logging.Logger,
    meta_extra: dict | None = None,
) -> tuple[ParsedMove, dict]:
    """Validate a provider result against the board.

    Returns (parsed, meta); parsed["ok"] is False for transport failures as well as
    for unusable text.
    """
    meta: dict = {"latency_ms": proposal.latency_ms}
    if proposal.ok:
        raw = proposal.text  # type: ignore[union-attr]
        parsed = sanitize_move(board, current, raw)
        meta["raw"] = raw
    else:
        parsed = {"ok": False, "reason": proposal.reason}  # type: ignore[union-attr]
        meta["raw"] = None
    if not parsed.get("ok"):
        log.debug("Proposal not usable: %s", parsed.get("reason"))
    meta["validator"] = dict(parsed)
    if meta_extra:
        meta.update(meta_extra)
    return parsed, meta
