"""
LLM-backed opponent.

choose() runs the move-request policy for one turn:
1) ask the provider for a move and validate the reply;
2) if unusable, ask once more with the explicit list of legal moves;
3) if still unusable, pick uniformly at random from the legal moves.
A side with no legal move gets a "pass" decision without any request.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from .config import ProviderConfig
from .game_state import GameState, legal_moves
from .llm_client import request_move
from .llm_play import MoveDecision, process_proposal
from .notation import coord_to_algebraic
from .prompting import PromptConfig, build_prompt_messages


@dataclass
class LLMOpponent:
    provider_cfg: ProviderConfig
    prompt_cfg: PromptConfig = field(default_factory=PromptConfig)
    name: Optional[str] = None
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def __post_init__(self):
        self.log = logging.getLogger("LLMOpponent")

    @property
    def model(self) -> str:
        return self.provider_cfg.model

    def label(self) -> str:
        return self.name or self.model

    def choose(self, state: GameState) -> MoveDecision:
        legal = legal_moves(state)
        if not legal:
            return MoveDecision(coord=None, source="pass", meta={"model": self.model})

        board, current = state.board, state.current
        base_meta = {"model": self.model, "provider": self.provider_cfg.name}

        messages = build_prompt_messages(board, current, self.prompt_cfg)
        proposal = request_move(self.provider_cfg, messages)
        parsed, meta = process_proposal(proposal, board, current, self.log, meta_extra=self._prompt_meta(messages))
        attempts = [meta]
        if parsed.get("ok"):
            return MoveDecision(coord=parsed["coord"], source="llm", meta={**base_meta, "attempts": attempts})

        retry_list = ", ".join(coord_to_algebraic(c) for c in legal)
        self.log.info("LLM move unusable (%s, raw=%r); retrying with legal move list", parsed.get("reason"), meta.get("raw"))
        messages = build_prompt_messages(board, current, self.prompt_cfg, retry_list=retry_list)
        proposal = request_move(self.provider_cfg, messages)
        parsed, meta = process_proposal(proposal, board, current, self.log, meta_extra=self._prompt_meta(messages))
        attempts.append(meta)
        if parsed.get("ok"):
            return MoveDecision(coord=parsed["coord"], source="llm_retry", meta={**base_meta, "attempts": attempts})

        coord = self.rng.choice(legal)
        self.log.warning(
            "LLM failed twice (%r / %r); falling back to random move %s",
            attempts[0].get("raw"), attempts[1].get("raw"), coord_to_algebraic(coord),
        )
        return MoveDecision(coord=coord, source="fallback", meta={**base_meta, "attempts": attempts})

    @staticmethod
    def _prompt_meta(messages: list[dict]) -> dict:
        return {
            "system": messages[0]["content"] if messages else "",
            "prompt": messages[-1]["content"] if messages else "",
        }

    def close(self):
        # Nothing to release for API-based opponents
        return
