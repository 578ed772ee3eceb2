"""
Single-game runner and config.

- GameConfig: knobs for mode, board size, max plies and console logging.
- GameRunner: orchestrates one game between two move sources (LLM, random, console human,
  web human) on top of the immutable GameState controller.
  - Asks the side to move for a MoveDecision, applies it via game_state.play(), which
    re-validates against the current state, and records per-ply history.
  - An automated source that returns an unusable move is recorded and replaced by a random
    legal move so no turn is silently lost; human moves are rejected instead.
  - Keeps a short newest-first event log for UIs and exposes conversation, structured
    history, metrics and summary exports.
"""
from __future__ import annotations

import logging
import random
import statistics
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .game_state import (
    GameMode,
    GameState,
    PlayResult,
    initial_state,
    is_terminal,
    legal_moves,
    play,
    reset,
    scores,
    set_ai_thinking,
)
from .human_opponent import HumanOpponent
from .llm_opponent import LLMOpponent
from .llm_play import MoveDecision
from .notation import algebraic_to_coord, coord_to_algebraic
from .othello import BLACK, WHITE, Player
from .prompting import board_to_ascii
from .user_opponent import UserOpponent

EVENT_LOG_LIMIT = 100
COLOR_NAMES = {BLACK: "Black", WHITE: "White"}


@dataclass
class GameConfig:
    mode: GameMode = "PV_AI"
    size: int = 8
    # An 8x8 game has at most 60 placements; this only guards against runaway loops.
    max_plies: int = 200
    # Console logging of moves as they happen
    game_log: bool = False
    cancel_event: threading.Event | None = None


class GameRunner:
    def __init__(self, black, white, cfg: GameConfig | None = None, seed: int | None = None):
        self.log = logging.getLogger("GameRunner")
        self.cfg = cfg or GameConfig()
        self.players: Dict[Player, Any] = {BLACK: black, WHITE: white}
        self.state: GameState = initial_state(self.cfg.mode, self.cfg.size)
        self.records: List[dict] = []
        self.events: List[str] = []
        self.termination_reason: Optional[str] = None
        self.start_ts = time.time()
        self._rng = random.Random(seed)

    # ---------------- Queries -----------------
    def side_to_move(self) -> Player:
        return self.state.current

    def is_over(self) -> bool:
        return is_terminal(self.state)

    def player_label(self, color: Player) -> str:
        p = self.players[color]
        if isinstance(p, LLMOpponent):
            return p.label()
        return getattr(p, "name", None) or COLOR_NAMES[color]

    def player_type(self, color: Player) -> str:
        p = self.players[color]
        if isinstance(p, LLMOpponent):
            return "llm"
        if isinstance(p, (HumanOpponent, UserOpponent)):
            return "human"
        return "other"

    def _is_human(self, color: Player) -> bool:
        return isinstance(self.players[color], HumanOpponent)

    def needs_ai_turn(self) -> bool:
        """True when the game is running and the side to move is not a web-driven human."""
        if self.is_over() or self._cancelled():
            return False
        return not self._is_human(self.state.current)

    def _cancelled(self) -> bool:
        return bool(self.cfg.cancel_event and self.cfg.cancel_event.is_set())

    # ---------------- Commands -----------------
    def reset(self, mode: GameMode | None = None) -> GameState:
        mode = mode or self.state.mode
        self.state = reset(mode, self.cfg.size)
        self.records.clear()
        self.events.clear()
        self.termination_reason = None
        self.start_ts = time.time()
        self.log.info("Game reset: mode=%s size=%d", mode, self.cfg.size)
        return self.state

    def submit_human_move(self, text: str) -> PlayResult:
        """Apply a move typed by a human in algebraic notation.

        Rejections (bad_coordinate, not_human_turn, illegal_move, game_over) leave
        the state untouched.
        """
        color = self.state.current
        if self.is_over():
            return PlayResult(ok=False, state=self.state, reason="game_over")
        if not self._is_human(color):
            return PlayResult(ok=False, state=self.state, reason="not_human_turn")
        coord = algebraic_to_coord(text or "", self.state.size)
        if coord is None:
            return PlayResult(ok=False, state=self.state, reason="bad_coordinate")
        res = play(self.state, coord)
        if not res.ok:
            self.log.debug("Rejected human move %s: %s", text, res.reason)
            return res
        self._commit(color, MoveDecision(coord=coord, source="human", meta={"raw": text}), res)
        return res

    def step(self) -> Optional[PlayResult]:
        """Play one ply for an automated side. Returns None if nothing could be played."""
        if not self.needs_ai_turn():
            return None
        color = self.state.current
        player = self.players[color]
        self.state = set_ai_thinking(self.state, True)
        try:
            decision: MoveDecision = player.choose(self.state)
        except Exception as exc:  # noqa: BLE001 - any move source failure falls back to a random move
            self.log.exception("%s move source %s failed", color, self.player_label(color))
            decision = MoveDecision(coord=None, source="error", meta={"error": f"{type(exc).__name__}: {exc}"})
        finally:
            self.state = set_ai_thinking(self.state, False)

        if decision.coord is None:
            if legal_moves(self.state):
                reason = "move_source_error" if decision.source == "error" else "no_move"
                self._record_rejected(color, decision, reason)
                decision = self._fallback(decision)
            else:
                # play() never hands the turn to a side without moves
                self.log.error("%s has no legal move but the game is not over", color)
                self.termination_reason = "no_legal_move"
                return None

        res = play(self.state, decision.coord)
        if not res.ok:
            # Stale or illegal proposal: re-validated against the current state and refused.
            self._record_rejected(color, decision, res.reason or "illegal_move")
            decision = self._fallback(decision)
            res = play(self.state, decision.coord)
        self._commit(color, decision, res)
        return res

    def play(self) -> Optional[str]:
        """Run automated plies until the game ends, max_plies is reached, or it is cancelled."""
        while not self.is_over() and len(self.records) < self.cfg.max_plies:
            if self._cancelled():
                self.termination_reason = "cancelled"
                break
            if self._is_human(self.state.current):
                self.termination_reason = "awaiting_human"
                break
            if self.step() is None:
                break
        if self.is_over():
            self.termination_reason = self.termination_reason or "normal_game_end"
        elif self.termination_reason is None and len(self.records) >= self.cfg.max_plies:
            self.termination_reason = "max_plies_reached"
        black, white = scores(self.state)
        self.log.info("Game finished winner=%s reason=%s plies=%d score B=%d W=%d",
                      self.state.winner, self.termination_reason, len(self.records), black, white)
        return self.state.winner

    # ---------------- Internals -----------------
    def _fallback(self, decision: MoveDecision) -> MoveDecision:
        coord = self._rng.choice(legal_moves(self.state))
        meta = dict(decision.meta)
        meta["replaced_source"] = decision.source
        return MoveDecision(coord=coord, source="fallback", meta=meta)

    def _record_rejected(self, color: Player, decision: MoveDecision, reason: str):
        move = coord_to_algebraic(decision.coord) if decision.coord is not None else None
        self.records.append({
            "ply": None,
            "actor": color,
            "label": self.player_label(color),
            "move": move,
            "ok": False,
            "reason": reason,
            "source": decision.source,
            "meta": decision.meta,
        })
        self._event(f"{self._event_actor(color)} invalid move: {move or '(none)'} ({reason})")
        self.log.warning("Rejected %s move %s from %s: %s", color, move, decision.source, reason)

    def _commit(self, color: Player, decision: MoveDecision, res: PlayResult):
        self.state = res.state
        alg = coord_to_algebraic(decision.coord)
        ply = sum(1 for r in self.records if r.get("ok")) + 1
        black, white = scores(self.state)
        self.records.append({
            "ply": ply,
            "actor": color,
            "label": self.player_label(color),
            "move": alg,
            "ok": True,
            "source": decision.source,
            "flips": len(res.flips),
            "passed": res.passed,
            "score": {"B": black, "W": white},
            "meta": decision.meta,
        })
        who = self._event_actor(color)
        if decision.source == "llm_retry":
            self._event(f"{who} (retry) -> {alg}")
        elif decision.source == "fallback":
            self._event(f"{who} failed to propose a usable move. Quick Choose: {alg}")
        else:
            self._event(f"{who} -> {alg}")
        if res.passed:
            self._event(f"{COLOR_NAMES[res.passed]} has no legal move and passes")
        if self.state.winner:
            self._event(f"Game over: {self.winner_text()}")

        if self.cfg.game_log:
            self.log.info("[ply %d] %s: move=%s source=%s flips=%d score B=%d W=%d",
                          ply, COLOR_NAMES[color], alg, decision.source, len(res.flips), black, white)
        else:
            self.log.debug("Ply %d %s move %s source=%s", ply, color, alg, decision.source)

    def _event_actor(self, color: Player) -> str:
        if self.state.mode == "PV_AI" and self.player_type(color) != "human":
            return "AI"
        return COLOR_NAMES[color]

    def _event(self, line: str):
        self.events.insert(0, line)
        del self.events[EVENT_LOG_LIMIT:]

    def winner_text(self) -> Optional[str]:
        w = self.state.winner
        if w is None:
            return None
        if w == "DRAW":
            return "Draw!"
        if self.state.mode == "PV_AI":
            return "You win!" if self.player_type(w) == "human" else "AI wins!"
        return "Black Wins!" if w == BLACK else "White Wins!"

    def status_text(self) -> str:
        legal = legal_moves(self.state)
        moves = ", ".join(coord_to_algebraic(c) for c in legal) or "none"
        return f"Turn: {self.state.current} | Valid moves: {moves}"

    # ---------------- Export -----------------
    def export_conversation(self) -> List[dict]:
        """Chat-style messages reconstructed from the LLM attempts recorded per ply."""
        messages: List[dict] = []
        system_logged: set = set()
        for rec in self.records:
            meta = rec.get("meta") or {}
            model = meta.get("model")
            for attempt in meta.get("attempts", []):
                sys_text = attempt.get("system")
                if sys_text and (model, sys_text) not in system_logged:
                    messages.append({"role": "system", "content": sys_text, "model": model})
                    system_logged.add((model, sys_text))
                if attempt.get("prompt"):
                    messages.append({"role": "user", "content": attempt["prompt"], "model": model})
                if attempt.get("raw"):
                    messages.append({"role": "assistant", "content": attempt["raw"], "model": model})
        return messages

    def export_structured_history(self) -> dict:
        black, white = scores(self.state)
        moves = []
        for rec in self.records:
            moves.append({
                "ply": rec.get("ply"),
                "side": COLOR_NAMES[rec["actor"]].lower(),
                "move": rec.get("move"),
                "legal": rec.get("ok"),
                "source": rec.get("source"),
                "flips": rec.get("flips"),
                "passed": rec.get("passed"),
                "reason": rec.get("reason"),
            })
        return {
            "size": self.state.size,
            "mode": self.state.mode,
            "players": {
                "black": {"label": self.player_label(BLACK), "type": self.player_type(BLACK)},
                "white": {"label": self.player_label(WHITE), "type": self.player_type(WHITE)},
            },
            "winner": self.state.winner,
            "score": {"B": black, "W": white},
            "termination_reason": self.termination_reason,
            "moves": moves,
            "final_board": board_to_ascii(self.state.board, self.state.current),
        }

    # ---------------- Metrics -----------------
    def metrics(self) -> dict:
        played = [r for r in self.records if r.get("ok")]
        rejected = [r for r in self.records if not r.get("ok")]
        llm_turns = [r for r in played if r.get("meta", {}).get("attempts")]
        latencies = [
            a.get("latency_ms", 0)
            for r in llm_turns
            for a in r.get("meta", {}).get("attempts", [])
            if a.get("latency_ms") is not None
        ]
        first_try = [r for r in llm_turns if r.get("source") == "llm"]
        retries = [r for r in llm_turns if r.get("source") == "llm_retry"]
        fallbacks = [r for r in played if r.get("source") == "fallback"]
        black, white = scores(self.state)
        return {
            "plies_total": len(played),
            "plies_black": sum(1 for r in played if r["actor"] == BLACK),
            "plies_white": sum(1 for r in played if r["actor"] == WHITE),
            "passes": sum(1 for r in played if r.get("passed")),
            "rejected_moves": len(rejected),
            "llm_turns": len(llm_turns),
            "llm_first_try_moves": len(first_try),
            "llm_retry_moves": len(retries),
            "fallback_moves": len(fallbacks),
            "llm_first_try_rate": (len(first_try) / len(llm_turns)) if llm_turns else 0.0,
            "latency_ms_avg": statistics.mean(latencies) if latencies else 0,
            "winner": self.state.winner,
            "score": {"B": black, "W": white},
            "termination_reason": self.termination_reason,
            "duration_s": round(time.time() - self.start_ts, 2),
            "mode": self.state.mode,
            "black": self.player_label(BLACK),
            "white": self.player_label(WHITE),
        }

    def summary(self) -> dict:
        m = self.metrics()
        m["history"] = self.export_structured_history()
        m["conversation"] = self.export_conversation()
        return m

    def close(self):
        for p in self.players.values():
            p.close()
