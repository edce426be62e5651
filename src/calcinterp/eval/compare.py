from __future__ import annotations

import logging
import math
from typing import Any, Iterable

import numpy as np
from pydantic import BaseModel, Field

from calcinterp.dsl.ast import ast_equal as trees_equal
from calcinterp.dsl.tokens import tokenize
from calcinterp.errors import InterpreterError
from calcinterp.interp.evaluator import evaluate
from calcinterp.interp.pipeline import ErrorInfo
from calcinterp.parse.strategy import BOTTOM_UP, TOP_DOWN, parse
from calcinterp.parse.steps import ParseResult

logger = logging.getLogger(__name__)


class StrategyComparison(BaseModel):
    expression: str
    ast_equal: bool = False
    results_equal: bool = False
    top_down_result: float | None = None
    bottom_up_result: float | None = None
    top_down_steps: int = 0
    bottom_up_steps: int = 0
    errors: dict[str, ErrorInfo] = Field(default_factory=dict)

    @property
    def agree(self) -> bool:
        """Both strategies succeeded with equal trees and results, or both failed in the same stage."""
        if self.errors:
            td = self.errors.get(TOP_DOWN)
            bu = self.errors.get(BOTTOM_UP)
            if td is None or bu is None or td.category != bu.category:
                return False
            return self.ast_equal if td.category == "EVALUATOR" else True
        return self.ast_equal and self.results_equal


def _same_value(a: float | None, b: float | None) -> bool:
    if a is None or b is None:
        return a is b
    # NaN never reaches here; sign of zero must also match.
    return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)


def compare_strategies(expression: str, *, max_iterations: int | None = None) -> StrategyComparison:
    cmp = StrategyComparison(expression=expression)
    try:
        tokens = tokenize(expression)
    except InterpreterError as exc:
        info = ErrorInfo.from_error(exc, expression)
        cmp.errors = {TOP_DOWN: info, BOTTOM_UP: info}
        return cmp
    parsed: dict[str, ParseResult] = {}
    results: dict[str, float] = {}
    for strategy in (TOP_DOWN, BOTTOM_UP):
        try:
            parsed[strategy] = parse(tokens, strategy, max_iterations=max_iterations)
            results[strategy] = evaluate(parsed[strategy].ast)
        except InterpreterError as exc:
            cmp.errors[strategy] = ErrorInfo.from_error(exc, expression)
    if TOP_DOWN in parsed:
        cmp.top_down_steps = len(parsed[TOP_DOWN].steps)
    if BOTTOM_UP in parsed:
        cmp.bottom_up_steps = len(parsed[BOTTOM_UP].steps)
    if TOP_DOWN in parsed and BOTTOM_UP in parsed:
        cmp.ast_equal = trees_equal(parsed[TOP_DOWN].ast, parsed[BOTTOM_UP].ast)
    cmp.top_down_result = results.get(TOP_DOWN)
    cmp.bottom_up_result = results.get(BOTTOM_UP)
    if TOP_DOWN in results and BOTTOM_UP in results:
        cmp.results_equal = _same_value(cmp.top_down_result, cmp.bottom_up_result)
    if not cmp.agree:
        logger.warning("strategies disagree expression=%r errors=%s", expression, sorted(cmp.errors))
    return cmp


def _rate(flags: Iterable[bool]) -> float:
    vals = list(flags)
    return float(np.mean(vals)) if vals else 0.0


def _mean_steps(counts: Iterable[int]) -> float:
    vals = [c for c in counts if c > 0]
    return float(np.mean(vals)) if vals else 0.0


def run_compare(expressions: Iterable[str], *, max_iterations: int | None = None) -> dict[str, Any]:
    items = list(expressions)
    comparisons: list[StrategyComparison] = []
    for idx, expr in enumerate(items):
        comparisons.append(compare_strategies(expr, max_iterations=max_iterations))
        if idx % 50 == 0 or idx + 1 == len(items):
            logger.info("compare progress %d/%d", idx + 1, len(items))
    report: dict[str, Any] = {
        "total": len(comparisons),
        "agreement_rate": _rate(c.agree for c in comparisons),
        "error_rate": _rate(bool(c.errors) for c in comparisons),
        "mean_steps": {
            TOP_DOWN: _mean_steps(c.top_down_steps for c in comparisons),
            BOTTOM_UP: _mean_steps(c.bottom_up_steps for c in comparisons),
        },
        "disagreements": [c.model_dump() for c in comparisons if not c.agree],
        "rows": [c.model_dump() for c in comparisons],
    }
    return report
