from calcinterp.dsl.ast import BinaryOp, Number, UnaryOp, ast_to_string
from calcinterp.dsl.tokens import Token, TokenKind, tokenize
from calcinterp.errors import (
    EvaluatorError,
    InterpreterError,
    ParserError,
    TokenizerError,
    format_error,
)
from calcinterp.interp.evaluator import EvaluationTrace, evaluate, evaluate_with_trace
from calcinterp.parse.steps import ParseResult, ParseStep, StepAction
from calcinterp.parse.strategy import parse

__version__ = "0.1.0"

__all__ = [
    "BinaryOp",
    "EvaluationTrace",
    "EvaluatorError",
    "InterpreterError",
    "Number",
    "ParseResult",
    "ParseStep",
    "ParserError",
    "StepAction",
    "Token",
    "TokenKind",
    "TokenizerError",
    "UnaryOp",
    "ast_to_string",
    "evaluate",
    "evaluate_with_trace",
    "format_error",
    "parse",
    "tokenize",
]
