import argparse
import json
import logging

from llmothello.config import SETTINGS, ConfigError, provider_config, resolve_keys
from llmothello.game import GameConfig, GameRunner
from llmothello.llm_opponent import LLMOpponent
from llmothello.othello import validate_size
from llmothello.prompting import DIFFICULTIES, PromptConfig
from llmothello.random_opponent import RandomOpponent
from llmothello.user_opponent import UserOpponent


def board_size(text: str) -> int:
    """argparse type for --size: an even board size from 4 to 26."""
    try:
        size = int(text)
        if size < 4:
            raise ValueError(f"Board size must be at least 4, got {size}")
        return validate_size(size)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_ai(args):
    if args.opponent == "random":
        return RandomOpponent(seed=args.seed)
    cfg = provider_config(args.provider, resolve_keys(args.keys), model=args.model)
    return LLMOpponent(provider_cfg=cfg, prompt_cfg=PromptConfig(difficulty=args.difficulty))


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Play one Othello game in the console.")
    ap.add_argument("--mode", choices=["PV_AI", "PVP", "AI_V_AI"], default="PV_AI",
                    help="PV_AI: you (Black) vs the AI; PVP: two humans at one keyboard; "
                         "AI_V_AI: random Black vs the AI, scored like PVP (results name Black/White, not you/AI)")
    ap.add_argument("--opponent", choices=["llm", "random"], default="llm", help="Who plays White when White is automated")
    ap.add_argument("--provider", choices=["openai", "anthropic", "gemini"], default=None, help="LLM provider (default: first one with a key)")
    ap.add_argument("--model", default=None, help="Model name (overrides settings)")
    ap.add_argument("--difficulty", choices=list(DIFFICULTIES), default=SETTINGS.difficulty if SETTINGS.difficulty in DIFFICULTIES else "hard")
    ap.add_argument("--keys", default=None, help="Path to keys.json (default: repo root)")
    ap.add_argument("--size", type=board_size, default=8, help="Even board size from 4 to 26")
    ap.add_argument("--max-plies", type=int, default=200)
    ap.add_argument("--seed", type=int, default=None, help="Seed for random choices")
    ap.add_argument("--log-level", default="INFO", help="Python logging level (e.g., INFO, DEBUG)")
    args = ap.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    log = logging.getLogger("play_one")

    try:
        if args.mode == "PVP":
            black, white = UserOpponent(), UserOpponent()
        elif args.mode == "AI_V_AI":
            black, white = RandomOpponent(seed=args.seed), build_ai(args)
        else:
            black, white = UserOpponent(), build_ai(args)
    except ConfigError as e:
        ap.error(str(e))

    # Only PV_AI has a human side to address as "you"; AI_V_AI is reported with colour names
    mode = "PV_AI" if args.mode == "PV_AI" else "PVP"
    gcfg = GameConfig(mode=mode, size=args.size, max_plies=args.max_plies, game_log=True)
    runner = GameRunner(black=black, white=white, cfg=gcfg, seed=args.seed)
    log.info("Starting game: mode=%s black=%s white=%s size=%d", args.mode, runner.player_label("B"), runner.player_label("W"), args.size)
    try:
        runner.play()
    except KeyboardInterrupt:
        runner.termination_reason = "cancelled"
        print()

    metrics = runner.metrics()
    print("Result:", runner.winner_text() or "(unfinished)")
    print("Termination:", runner.termination_reason)
    print("Score:", metrics["score"])
    print("Metrics:", json.dumps(metrics, indent=2))
    runner.close()
