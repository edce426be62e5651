from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from calcinterp.dsl.ast import BinaryOp, Node, Number, UnaryOp
from calcinterp.errors import EvaluatorError
from calcinterp.util.numfmt import format_number

logger = logging.getLogger(__name__)

_OVERFLOW_MESSAGES = {
    "+": "Addition result overflow",
    "-": "Subtraction result overflow",
    "*": "Multiplication result overflow",
    "/": "Division result overflow",
}


@dataclass(frozen=True)
class EvaluationTrace:
    result: float
    steps: list[str] = field(default_factory=list)


def _apply_unary(operator: str, value: float) -> float:
    if operator == "+":
        return value
    if operator == "-":
        return -value
    raise EvaluatorError(f"Unknown unary operator: {operator}")


def _apply_binary(operator: str, left: float, right: float) -> float:
    if operator == "+":
        result = left + right
    elif operator == "-":
        result = left - right
    elif operator == "*":
        result = left * right
    elif operator == "/":
        if right == 0:
            raise EvaluatorError("Division by zero")
        result = left / right
    else:
        raise EvaluatorError(f"Unknown binary operator: {operator}")
    if not math.isfinite(result):
        raise EvaluatorError(_OVERFLOW_MESSAGES[operator])
    return result


def _walk(node: Node, trace: list[str] | None, depth: int) -> float:
    indent = "  " * depth
    if isinstance(node, Number):
        if trace is not None:
            trace.append(f"{indent}Evaluating Number: {format_number(node.value)}")
        if not math.isfinite(node.value):
            raise EvaluatorError(f"Invalid number value: {node.value}")
        return node.value
    if isinstance(node, UnaryOp):
        if trace is not None:
            trace.append(f"{indent}Evaluating UnaryOp: {node.operator}")
        operand = _walk(node.operand, trace, depth + 1)
        result = _apply_unary(node.operator, operand)
        if trace is not None:
            trace.append(
                f"{indent}Result: {node.operator}{format_number(operand)} = {format_number(result)}"
            )
        return result
    if isinstance(node, BinaryOp):
        if trace is not None:
            trace.append(f"{indent}Evaluating BinaryOp: {node.operator}")
        left = _walk(node.left, trace, depth + 1)
        right = _walk(node.right, trace, depth + 1)
        if not (math.isfinite(left) and math.isfinite(right)):
            raise EvaluatorError("Invalid operand values")
        result = _apply_binary(node.operator, left, right)
        if trace is not None:
            trace.append(
                f"{indent}Result: {format_number(left)} {node.operator} "
                f"{format_number(right)} = {format_number(result)}"
            )
        return result
    raise EvaluatorError(f"Unknown node type: {type(node).__name__}")


def _run(ast: Node, trace: list[str] | None) -> float:
    try:
        return _walk(ast, trace, 0)
    except RecursionError:
        raise EvaluatorError("Expression nested too deeply") from None


def evaluate(ast: Node) -> float:
    result = _run(ast, None)
    logger.debug("evaluate result=%r", result)
    return result


def evaluate_with_trace(ast: Node) -> EvaluationTrace:
    """Evaluate ``ast`` and record one indented line per visit, children before the result line."""
    trace: list[str] = []
    result = _run(ast, trace)
    logger.debug("evaluate_with_trace result=%r lines=%d", result, len(trace))
    return EvaluationTrace(result=result, steps=trace)
