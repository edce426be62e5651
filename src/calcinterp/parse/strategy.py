from __future__ import annotations

import logging
from typing import Sequence

from calcinterp.dsl.tokens import Token
from calcinterp.parse.descent import STRATEGY as TOP_DOWN
from calcinterp.parse.descent import parse_top_down
from calcinterp.parse.shift_reduce import STRATEGY as BOTTOM_UP
from calcinterp.parse.shift_reduce import parse_bottom_up
from calcinterp.parse.steps import ParseResult

STRATEGIES: tuple[str, ...] = (TOP_DOWN, BOTTOM_UP)

logger = logging.getLogger(__name__)


def normalize_strategy(strategy: str) -> str:
    key = strategy.strip().lower().replace("_", "-")
    aliases = {"td": TOP_DOWN, "rd": TOP_DOWN, "bu": BOTTOM_UP, "sr": BOTTOM_UP}
    key = aliases.get(key, key)
    if key not in STRATEGIES:
        raise ValueError(f"unknown parsing strategy: {strategy!r} (expected one of {', '.join(STRATEGIES)})")
    return key


def parse(
    tokens: Sequence[Token],
    strategy: str = TOP_DOWN,
    *,
    max_iterations: int | None = None,
) -> ParseResult:
    """Parse ``tokens`` with the chosen strategy; both return equal trees for equal input."""
    resolved = normalize_strategy(strategy)
    logger.debug("parse strategy=%s tokens=%d", resolved, len(tokens))
    if resolved == BOTTOM_UP:
        return parse_bottom_up(tokens, max_iterations=max_iterations)
    return parse_top_down(tokens)
