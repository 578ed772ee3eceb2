"""
Prompt builders and config for LLM move requests using a modular template.

Callers supply a difficulty (selects the persona line) and optionally custom
system/user templates whose {PLACEHOLDERS} are substituted per turn.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from .othello import LETTERS, Board, Player

DIFFICULTIES = ("easy", "medium", "hard")

PERSONAS = {
    "easy": "You are a beginner Othello (Reversi) player.",
    "medium": "You are an intermediate Othello (Reversi) player.",
    "hard": "You are a world-class Othello (Reversi) player.",
}

FIRST_TRY_LINE = 'Never respond with "PASS" unless *no legal moves* exist. Do not explain or comment.'
RETRY_LINE = "ONLY select a value from the provided list of legal moves."

DEFAULT_SYSTEM_TEMPLATE = """{PERSONA}
Respond with ONLY one valid move for the current player in standard algebraic form (A-{LAST_LETTER} followed by 1-{SIZE}), for example "D3".
{RETRY_LINE} Output just the coordinate."""

DEFAULT_USER_TEMPLATE = """Board ({SIZE}x{SIZE}), '.' = empty, B=Black, W=White. Return a single legal move for {SIDE_TO_MOVE}.
{LEGAL_MOVES_LINE}.
{BOARD}"""


@dataclass
class PromptConfig:
    """Configuration for shaping move prompts."""

    difficulty: str = "hard"
    system_template: str = DEFAULT_SYSTEM_TEMPLATE
    user_template: str = DEFAULT_USER_TEMPLATE


def render_custom_prompt(template: str, values: Dict[str, str]) -> str:
    """Replace known placeholders in the template. Unknown tokens are left intact."""
    rendered = template or ""
    for key, val in values.items():
        rendered = rendered.replace(f"{{{key}}}", val)
    return rendered


def board_to_ascii(board: Board, current: Player) -> str:
    size = len(board)
    lines = ["   " + " ".join(LETTERS[:size])]
    for r, row in enumerate(board):
        cells = " ".join(cell or "." for cell in row)
        lines.append(f"{r + 1:>2} {cells}")
    lines.append(f"Current: {current}")
    return "\n".join(lines)


def system_prompt(difficulty: str, size: int, is_retry: bool, template: str = DEFAULT_SYSTEM_TEMPLATE) -> str:
    persona = PERSONAS.get((difficulty or "").lower(), PERSONAS["hard"])
    return render_custom_prompt(template, {
        "PERSONA": persona,
        "LAST_LETTER": LETTERS[size - 1],
        "SIZE": str(size),
        "RETRY_LINE": RETRY_LINE if is_retry else FIRST_TRY_LINE,
    })


def user_prompt(board: Board, current: Player, retry_list: str = "", template: str = DEFAULT_USER_TEMPLATE) -> str:
    legal_line = f"List of Legal Moves: {retry_list}" if retry_list else 'If you cannot find a legal move, return "PASS"'
    return render_custom_prompt(template, {
        "SIZE": str(len(board)),
        "SIDE_TO_MOVE": current,
        "LEGAL_MOVES_LINE": legal_line,
        "BOARD": board_to_ascii(board, current),
    })


def build_prompt_messages(board: Board, current: Player, cfg: PromptConfig, retry_list: str = "") -> List[Dict[str, str]]:
    """System + user chat messages for one move request; a retry carries the legal-move list."""
    is_retry = bool(retry_list)
    return [
        {"role": "system", "content": system_prompt(cfg.difficulty, len(board), is_retry, cfg.system_template)},
        {"role": "user", "content": user_prompt(board, current, retry_list, cfg.user_template)},
    ]
