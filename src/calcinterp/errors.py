from __future__ import annotations

from typing import Literal

Category = Literal["TOKENIZER", "PARSER", "EVALUATOR"]

# Position used by errors that do not point at a source character.
NO_POSITION = -1

_EXPRESSION_PREFIX = "Expression: "


class InterpreterError(Exception):
    category: Category = "TOKENIZER"

    def __init__(self, message: str, position: int = NO_POSITION) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def to_dict(self) -> dict[str, object]:
        return {"category": self.category, "message": self.message, "position": self.position}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, position={self.position})"


class TokenizerError(InterpreterError):
    category: Category = "TOKENIZER"


class ParserError(InterpreterError):
    category: Category = "PARSER"


class EvaluatorError(InterpreterError):
    category: Category = "EVALUATOR"


def format_error(error: InterpreterError, expression: str) -> str:
    """Render an error with the expression echoed and a caret under the bad character."""
    lines = [f"{error.category} ERROR: {error.message}", "", f"{_EXPRESSION_PREFIX}{expression}"]
    if 0 <= error.position < len(expression):
        lines.append(" " * (len(_EXPRESSION_PREFIX) + error.position) + "^")
    return "\n".join(lines)
