"""
Minimal Flask API that wires the llmothello engine into a browser UI.

Endpoints:
- POST /api/games                 -> start a game (PVP or PV_AI); body {mode, difficulty, provider, model, opponent, size}
- GET  /api/games/<id>            -> current board, side to move, legal moves, scores, winner, event log
- POST /api/games/<id>/move       -> submit a human move {"move": "D3"}; in PV_AI the AI replies immediately
- POST /api/games/<id>/reset      -> restart the game, optionally switching mode
- GET  /api/models                -> selectable models per provider

Sessions live in memory only and are dropped after an hour of inactivity.
"""
from __future__ import annotations

import logging
import os
import threading
import time
import uuid
from typing import Dict, Optional

from flask import Flask, jsonify, request

from llmothello.config import MODELS, SETTINGS, ConfigError, provider_config, resolve_keys
from llmothello.game import GameConfig, GameRunner
from llmothello.game_state import GAME_MODES, legal_moves, scores
from llmothello.human_opponent import HumanOpponent
from llmothello.llm_opponent import LLMOpponent
from llmothello.notation import coord_to_algebraic
from llmothello.othello import MAX_SIZE
from llmothello.prompting import DIFFICULTIES, PromptConfig
from llmothello.random_opponent import RandomOpponent

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
log = logging.getLogger("server")

app = Flask(__name__)
games_lock = threading.Lock()

GAMES: Dict[str, dict] = {}
GAME_TTL_S = 3600  # drop inactive games after an hour to avoid leaks


def _cleanup_stale_games(max_age_s: int = GAME_TTL_S):
    now = time.time()
    with games_lock:
        expired = [gid for gid, sess in GAMES.items() if now - sess.get("updated_at", now) > max_age_s]
        for gid in expired:
            sess = GAMES.pop(gid, None)
            if sess:
                sess["runner"].close()


def _build_ai(data: dict):
    """Create the automated White player for PV_AI games."""
    opponent = str(data.get("opponent") or "llm").lower()
    if opponent == "random":
        return RandomOpponent()
    if opponent != "llm":
        raise ConfigError(f"Unsupported opponent '{opponent}'. Use 'llm' or 'random'.")
    difficulty = str(data.get("difficulty") or SETTINGS.difficulty).lower()
    if difficulty not in DIFFICULTIES:
        raise ConfigError(f"Unsupported difficulty '{difficulty}'. Use one of: {', '.join(DIFFICULTIES)}.")
    cfg = provider_config(data.get("provider"), resolve_keys(), model=data.get("model"))
    return LLMOpponent(provider_cfg=cfg, prompt_cfg=PromptConfig(difficulty=difficulty))


def _new_runner(data: dict, mode: str, size: int) -> GameRunner:
    black = HumanOpponent(size=size)
    white = _build_ai(data) if mode == "PV_AI" else HumanOpponent(size=size)
    return GameRunner(black=black, white=white, cfg=GameConfig(mode=mode, size=size))


def _serialize(session: dict) -> dict:
    runner: GameRunner = session["runner"]
    state = runner.state
    black, white = scores(state)
    return {
        "game_id": session["id"],
        "mode": state.mode,
        "size": state.size,
        "board": ["".join(cell or "." for cell in row) for row in state.board],
        "current": state.current,
        "legal_moves": [coord_to_algebraic(c) for c in legal_moves(state)],
        "score": {"B": black, "W": white},
        "winner": state.winner,
        "winner_text": runner.winner_text(),
        "last_move": coord_to_algebraic(state.last_move) if state.last_move else None,
        "ai_thinking": state.ai_thinking,
        "status": "finished" if runner.is_over() else "running",
        "status_text": runner.status_text(),
        "log": list(runner.events),
        "white_player": runner.player_label("W"),
    }


def _get_session(game_id: str) -> Optional[dict]:
    with games_lock:
        return GAMES.get(game_id)


def _play_ai_turns(session: dict) -> None:
    """Let the AI move while it holds the turn (it may move repeatedly after forced passes)."""
    runner: GameRunner = session["runner"]
    while runner.needs_ai_turn():
        if runner.step() is None:
            break
    session["updated_at"] = time.time()


def _parse_size(raw) -> int:
    if raw is None:
        return 8
    # bool is an int subclass; JSON true/false and floats are not sizes
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"size must be an integer, got {raw!r}")
    if raw < 4 or raw % 2 or raw > MAX_SIZE:
        raise ValueError(f"size must be an even number between 4 and {MAX_SIZE}")
    return raw


@app.route("/api/models", methods=["GET"])
def list_models():
    return jsonify(MODELS)


@app.route("/api/games", methods=["POST"])
def create_game():
    _cleanup_stale_games()
    data = request.get_json(silent=True) or {}
    mode = str(data.get("mode") or "PV_AI").upper()
    if mode not in GAME_MODES:
        return jsonify({"error": "bad_mode", "allowed": list(GAME_MODES)}), 400
    try:
        size = _parse_size(data.get("size"))
    except ValueError as e:
        return jsonify({"error": "bad_size", "detail": str(e)}), 400
    try:
        runner = _new_runner(data, mode, size)
    except ConfigError as e:
        return jsonify({"error": "config_error", "detail": str(e)}), 400

    game_id = f"game_{int(time.time())}_{uuid.uuid4().hex[:6]}"
    session = {
        "id": game_id,
        "runner": runner,
        "request": data,
        "created_at": time.time(),
        "updated_at": time.time(),
        "lock": threading.Lock(),
    }
    with games_lock:
        GAMES[game_id] = session
    log.info("Created game %s mode=%s size=%d white=%s", game_id, mode, size, runner.player_label("W"))
    return jsonify(_serialize(session)), 201


@app.route("/api/games/<game_id>", methods=["GET"])
def get_game(game_id: str):
    session = _get_session(game_id)
    if not session:
        return jsonify({"error": "not found"}), 404
    return jsonify(_serialize(session))


@app.route("/api/games/<game_id>/move", methods=["POST"])
def play_move(game_id: str):
    _cleanup_stale_games()
    session = _get_session(game_id)
    if not session:
        return jsonify({"error": "not found"}), 404
    data = request.get_json(silent=True) or {}
    raw_move = data.get("move")
    if not raw_move:
        return jsonify({"error": "missing_move"}), 400

    # Only one move proposal may be in flight per game.
    if not session["lock"].acquire(blocking=False):
        return jsonify({"error": "ai_busy"}), 409
    try:
        runner: GameRunner = session["runner"]
        res = runner.submit_human_move(str(raw_move))
        if not res.ok:
            body = {"error": res.reason}
            body.update(_serialize(session))
            return jsonify(body), 400
        session["updated_at"] = time.time()
        _play_ai_turns(session)
        return jsonify(_serialize(session))
    finally:
        session["lock"].release()


@app.route("/api/games/<game_id>/reset", methods=["POST"])
def reset_game(game_id: str):
    session = _get_session(game_id)
    if not session:
        return jsonify({"error": "not found"}), 404
    data = request.get_json(silent=True) or {}
    mode = str(data.get("mode") or session["runner"].state.mode).upper()
    if mode not in GAME_MODES:
        return jsonify({"error": "bad_mode", "allowed": list(GAME_MODES)}), 400
    if not session["lock"].acquire(blocking=False):
        return jsonify({"error": "ai_busy"}), 409
    try:
        runner: GameRunner = session["runner"]
        if mode != runner.state.mode:
            merged = {**session["request"], **data}
            try:
                new_runner = _new_runner(merged, mode, runner.state.size)
            except ConfigError as e:
                return jsonify({"error": "config_error", "detail": str(e)}), 400
            runner.close()
            session["runner"] = new_runner
            session["request"] = merged
        else:
            runner.reset(mode)
        session["updated_at"] = time.time()
        return jsonify(_serialize(session))
    finally:
        session["lock"].release()


@app.after_request
def add_cors_headers(response):
    response.headers["Access-Control-Allow-Origin"] = request.headers.get("Origin", "*")
    response.headers["Access-Control-Allow-Credentials"] = "true"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    # Prevent caching so the UI always sees the freshest board
    response.headers["Cache-Control"] = "no-store, max-age=0"
    return response


@app.route("/api/<path:path>", methods=["OPTIONS"])
def cors_preflight(path: str):
    return app.make_response(("", 204))


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 8000)), debug=True)
