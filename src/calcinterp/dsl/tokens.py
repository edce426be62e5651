from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from calcinterp.errors import ParserError, TokenizerError

logger = logging.getLogger(__name__)

OPERATORS = ("+", "-", "*", "/")
EOF_SYMBOL = "$"


class TokenKind(str, Enum):
    NUMBER = "NUMBER"
    OPERATOR = "OPERATOR"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: int

    @property
    def symbol(self) -> str:
        """Grammar symbol for this token: ``NUMBER``, the operator itself, a paren or ``$``."""
        if self.kind is TokenKind.NUMBER:
            return "NUMBER"
        if self.kind is TokenKind.EOF:
            return EOF_SYMBOL
        return self.text

    def to_dict(self) -> dict[str, object]:
        return {"kind": self.kind.value, "text": self.text, "position": self.position}


_SINGLE_CHAR_KINDS = {
    **{op: TokenKind.OPERATOR for op in OPERATORS},
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _read_number(expr: str, start: int) -> str:
    j = start
    saw_dot = False
    while j < len(expr) and (_is_digit(expr[j]) or expr[j] == "."):
        if expr[j] == ".":
            if saw_dot:
                raise TokenizerError("Invalid number format: multiple decimal points", j)
            saw_dot = True
        j += 1
    text = expr[start:j]
    if text.endswith("."):
        raise TokenizerError(f"Invalid number format: '{text}'", start)
    return text


def tokenize(source: str) -> list[Token]:
    """Split ``source`` into tokens, always terminated by one EOF token.

    Positions are offsets into the whitespace-trimmed source.
    """
    expr = source.strip()
    if not expr:
        raise TokenizerError("Empty expression", 0)
    tokens: list[Token] = []
    i = 0
    while i < len(expr):
        ch = expr[i]
        if ch.isspace():
            i += 1
            continue
        if _is_digit(ch) or ch == ".":
            text = _read_number(expr, i)
            tokens.append(Token(TokenKind.NUMBER, text, i))
            i += len(text)
            continue
        kind = _SINGLE_CHAR_KINDS.get(ch)
        if kind is None:
            raise TokenizerError(f"Invalid character '{ch}'", i)
        tokens.append(Token(kind, ch, i))
        i += 1
    if not tokens:
        raise TokenizerError("No valid tokens found", 0)
    tokens.append(Token(TokenKind.EOF, "", len(expr)))
    logger.debug("tokenize tokens=%d source=%r", len(tokens), expr)
    return tokens


def validate_stream(tokens: Sequence[Token]) -> None:
    """Parser precondition: at least one real token followed by exactly one EOF token."""
    if len(tokens) == 0 or (len(tokens) == 1 and tokens[0].kind is TokenKind.EOF):
        raise ParserError("Empty expression", 0)
    eof_count = sum(1 for tok in tokens if tok.kind is TokenKind.EOF)
    if eof_count != 1 or tokens[-1].kind is not TokenKind.EOF:
        raise ParserError("Token stream must end with exactly one end-of-input token", tokens[-1].position)


def token_texts(tokens: list[Token]) -> list[str]:
    """Texts of ``tokens`` with the EOF token shown as ``$``."""
    return [EOF_SYMBOL if tok.kind is TokenKind.EOF else tok.text for tok in tokens]


def strip_eof(tokens: list[Token]) -> list[Token]:
    return [tok for tok in tokens if tok.kind is not TokenKind.EOF]
