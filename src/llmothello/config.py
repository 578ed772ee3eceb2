"""
Configuration and environment loading for LLM Othello.

- Loads .env (python-dotenv) and settings.yml (YAML) from the repo root; YAML takes precedence
  over environment variables.
- Exposes SETTINGS with API keys, default provider/model and tuning knobs.
- Provider configuration is explicit: one frozen dataclass per supported provider, each
  carrying its own key, model and OpenAI-compatible endpoint.
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv

load_dotenv()


class ConfigError(RuntimeError):
    """Raised when provider credentials or settings are missing or malformed."""


def _repo_root() -> str:
    # this file: src/llmothello/config.py -> repo root is two levels up
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))


def _load_yaml(path: str) -> dict:
    if not os.path.isfile(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return data


_cfg = _load_yaml(os.path.join(_repo_root(), "settings.yml"))


def _get(name: str, default: Any, cast: Callable[[Any], Any] | None = None) -> Any:
    if name in _cfg:
        val = _cfg[name]
        return cast(val) if cast else val
    env = os.environ.get(name)
    if env is not None:
        return cast(env) if cast else env
    return default


@dataclass(frozen=True)
class Settings:
    # Auth
    openai_api_key: str
    anthropic_api_key: str
    gemini_api_key: str
    keys_path: str

    # Defaults for new games
    provider: str
    model: str
    difficulty: str

    # Tuning knobs
    responses_timeout_s: float
    max_tokens: int


SETTINGS = Settings(
    openai_api_key=_get("OPENAI_API_KEY", ""),
    anthropic_api_key=_get("ANTHROPIC_API_KEY", ""),
    gemini_api_key=_get("GEMINI_API_KEY", _get("GOOGLE_API_KEY", "")),
    keys_path=_get("LLMOTHELLO_KEYS_PATH", os.path.join(_repo_root(), "keys.json")),
    provider=_get("LLMOTHELLO_PROVIDER", ""),
    model=_get("LLMOTHELLO_MODEL", ""),
    difficulty=_get("LLMOTHELLO_DIFFICULTY", "hard"),
    responses_timeout_s=float(_get("LLMOTHELLO_RESPONSES_TIMEOUT_S", 60.0, cast=float)),
    max_tokens=int(_get("LLMOTHELLO_MAX_TOKENS", 16, cast=int)),
)


# ------------------------- Keys -------------------------
@dataclass(frozen=True)
class Keys:
    openai: str = ""
    anthropic: str = ""
    gemini: str = ""


def keys_from_settings(settings: Settings | None = None) -> Keys:
    settings = settings or SETTINGS
    return Keys(openai=settings.openai_api_key, anthropic=settings.anthropic_api_key, gemini=settings.gemini_api_key)


def load_keys(path: str | None = None) -> Keys:
    """Read a keys.json file: {"openai": "...", "anthropic": "...", "gemini": "..."}."""
    path = path or SETTINGS.keys_path
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Could not load keys file {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Keys file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Keys file {path} must contain a JSON object")
    return Keys(
        openai=str(data.get("openai") or ""),
        anthropic=str(data.get("anthropic") or ""),
        gemini=str(data.get("gemini") or ""),
    )


def resolve_keys(path: str | None = None) -> Keys:
    """keys.json when present, with environment/settings keys filling the gaps."""
    env_keys = keys_from_settings()
    path = path or SETTINGS.keys_path
    if not os.path.isfile(path):
        return env_keys
    file_keys = load_keys(path)
    return Keys(
        openai=file_keys.openai or env_keys.openai,
        anthropic=file_keys.anthropic or env_keys.anthropic,
        gemini=file_keys.gemini or env_keys.gemini,
    )


# ------------------------- Providers -------------------------
MODELS: Dict[str, List[str]] = {
    "openai": ["gpt-5-mini", "gpt-4o-mini", "gpt-4o"],
    "anthropic": ["claude-3-5-sonnet-latest", "claude-3-5-haiku-latest", "claude-3-opus-latest"],
    "gemini": ["gemini-2.5-pro", "gemini-2.5-flash", "gemini-2.5-flash-lite"],
}


@dataclass(frozen=True)
class OpenAIConfig:
    api_key: str
    model: str = "gpt-4o-mini"
    base_url: str = "https://api.openai.com/v1"
    timeout_s: float = 60.0
    max_tokens: int = 16
    name: str = "openai"


@dataclass(frozen=True)
class AnthropicConfig:
    api_key: str
    model: str = "claude-3-5-sonnet-latest"
    # Anthropic's OpenAI-compatible endpoint
    base_url: str = "https://api.anthropic.com/v1/"
    timeout_s: float = 60.0
    max_tokens: int = 16
    name: str = "anthropic"


@dataclass(frozen=True)
class GeminiConfig:
    api_key: str
    model: str = "gemini-2.5-flash"
    # Gemini's OpenAI-compatible endpoint
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    timeout_s: float = 60.0
    max_tokens: int = 16
    name: str = "gemini"


ProviderConfig = Union[OpenAIConfig, AnthropicConfig, GeminiConfig]

_PROVIDERS = {
    "openai": OpenAIConfig,
    "anthropic": AnthropicConfig,
    "gemini": GeminiConfig,
}


def choose_provider(keys: Optional[Keys]) -> str:
    """Default provider: OpenAI if keyed, else Anthropic, else Gemini."""
    if keys and keys.openai:
        return "openai"
    if keys and keys.anthropic:
        return "anthropic"
    return "gemini"


def provider_config(name: str | None, keys: Keys, model: str | None = None, settings: Settings | None = None) -> ProviderConfig:
    settings = settings or SETTINGS
    name = (name or settings.provider or choose_provider(keys)).lower()
    cls = _PROVIDERS.get(name)
    if cls is None:
        raise ConfigError(f"Unsupported provider '{name}'. Use one of: {', '.join(_PROVIDERS)}.")
    api_key = getattr(keys, name, "")
    if not api_key:
        raise ConfigError(f"No API key configured for provider '{name}'.")
    kwargs: Dict[str, Any] = {
        "api_key": api_key,
        "timeout_s": settings.responses_timeout_s,
        "max_tokens": settings.max_tokens,
    }
    model = model or settings.model
    if model:
        kwargs["model"] = model
    return cls(**kwargs)
