"""
LLM client facade over OpenAI-compatible chat endpoints (OpenAI, Anthropic, Gemini).

The rest of the code should not care which provider is in use. request_move() sends
`model` + `messages` once and returns an explicit result: ProposalOk(text) or
ProposalFailed(reason). A retry with more context is a second, separate request made
by the caller.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Union

from openai import OpenAI

from .config import ProviderConfig

log = logging.getLogger("llm_client")


@dataclass(frozen=True)
class ProposalOk:
    text: str
    latency_ms: int = 0
    ok: bool = True


@dataclass(frozen=True)
class ProposalFailed:
    reason: str
    latency_ms: int = 0
    ok: bool = False


Proposal = Union[ProposalOk, ProposalFailed]


@lru_cache(maxsize=16)
def _client(api_key: str, base_url: str) -> OpenAI:
    return OpenAI(api_key=api_key, base_url=base_url)


def request_move(cfg: ProviderConfig, messages: List[Dict[str, str]]) -> Proposal:
    """Ask the configured provider for a move; never raises for transport errors."""
    t0 = time.time()
    try:
        rsp = _client(cfg.api_key, cfg.base_url).chat.completions.create(
            model=cfg.model,
            messages=messages,
            temperature=0,
            max_tokens=cfg.max_tokens,
            timeout=cfg.timeout_s,
        )
    except Exception as exc:  # noqa: BLE001 - every SDK/transport error becomes a failed proposal
        ms = int((time.time() - t0) * 1000)
        log.exception("Chat request to %s (%s) failed", cfg.name, cfg.model)
        return ProposalFailed(reason=f"request_error:{type(exc).__name__}", latency_ms=ms)
    ms = int((time.time() - t0) * 1000)
    text = _extract_text(rsp).strip()
    if not text:
        log.warning("Empty reply from %s (%s)", cfg.name, cfg.model)
        return ProposalFailed(reason="empty_reply", latency_ms=ms)
    log.debug("Reply from %s (%s) in %d ms: %r", cfg.name, cfg.model, ms, text)
    return ProposalOk(text=text, latency_ms=ms)


def _extract_text(rsp) -> str:
    if not getattr(rsp, "choices", None):
        return ""
    msg = rsp.choices[0].message
    content = getattr(msg, "content", None)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for c in content:
            if isinstance(c, dict):
                if c.get("type") == "text" and isinstance(c.get("text"), str):
                    parts.append(c["text"])
                continue
            t = getattr(c, "text", None)
            if isinstance(t, str):
                parts.append(t)
        return "\n".join(parts)
    return ""
