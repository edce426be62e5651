from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field

from calcinterp.dsl.ast import ast_to_string
from calcinterp.dsl.tokens import strip_eof, tokenize
from calcinterp.errors import InterpreterError, format_error
from calcinterp.interp.evaluator import evaluate, evaluate_with_trace
from calcinterp.parse.strategy import TOP_DOWN, parse

logger = logging.getLogger(__name__)


class InterpretReport(BaseModel):
    expression: str
    strategy: str
    tokens: list[dict[str, Any]] = Field(default_factory=list)
    parse_tree: str = ""
    ast: dict[str, Any] = Field(default_factory=dict)
    result: float
    parsing_steps: list[dict[str, Any]] = Field(default_factory=list)
    evaluation_steps: list[str] = Field(default_factory=list)


class ErrorInfo(BaseModel):
    category: str
    message: str
    position: int
    formatted: str = ""

    @classmethod
    def from_error(cls, error: InterpreterError, expression: str) -> "ErrorInfo":
        return cls(
            category=error.category,
            message=error.message,
            position=error.position,
            formatted=format_error(error, expression.strip()),
        )


class InterpretOutcome(BaseModel):
    expression: str
    strategy: str
    report: InterpretReport | None = None
    error: ErrorInfo | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def interpret(
    expression: str,
    strategy: str = TOP_DOWN,
    *,
    max_iterations: int | None = None,
) -> InterpretReport:
    """Run the whole pipeline. The first stage to fail raises and nothing is returned."""
    tokens = tokenize(expression)
    parsed = parse(tokens, strategy, max_iterations=max_iterations)
    result = evaluate(parsed.ast)
    traced = evaluate_with_trace(parsed.ast)
    logger.debug("interpret strategy=%s result=%r steps=%d", parsed.strategy, result, len(parsed.steps))
    return InterpretReport(
        expression=expression,
        strategy=parsed.strategy,
        tokens=[tok.to_dict() for tok in strip_eof(tokens)],
        parse_tree=ast_to_string(parsed.ast),
        ast=parsed.ast.to_dict(),
        result=result,
        parsing_steps=[step.to_dict() for step in parsed.steps],
        evaluation_steps=traced.steps,
    )


def interpret_safe(
    expression: str,
    strategy: str = TOP_DOWN,
    *,
    max_iterations: int | None = None,
) -> InterpretOutcome:
    try:
        report = interpret(expression, strategy, max_iterations=max_iterations)
    except InterpreterError as exc:
        logger.debug("interpret failed category=%s message=%s", exc.category, exc.message)
        return InterpretOutcome(
            expression=expression,
            strategy=strategy,
            error=ErrorInfo.from_error(exc, expression),
        )
    return InterpretOutcome(expression=expression, strategy=report.strategy, report=report)
