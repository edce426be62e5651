"""Ordered grammar table for the shift-reduce engine.

Nonterminals are ``E`` (expression), ``T`` (term) and ``F`` (factor).
Terminals use their token symbol: ``NUMBER``, the binary operators, the
parentheses and ``$``. Prefix signs are shifted as ``u+`` / ``u-`` so that a
binary ``-`` followed by a factor never matches the unary rule.

Rules are tried in table order and the first match wins. Within one
nonterminal the longer right-hand sides come before the unit rule, so
``T * F`` is folded before ``F`` is promoted to ``T``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Sequence, Union

from calcinterp.dsl.ast import BinaryOp, Node, Number, UnaryOp
from calcinterp.dsl.tokens import EOF_SYMBOL, Token
from calcinterp.errors import ParserError

StackItem = Union[Token, Node]

EXPR = "E"
TERM = "T"
FACTOR = "F"

UNARY_PLUS = "u+"
UNARY_MINUS = "u-"

FOLLOW: dict[str, frozenset[str]] = {
    EXPR: frozenset({"+", "-", ")", EOF_SYMBOL}),
    TERM: frozenset({"+", "-", "*", "/", ")", EOF_SYMBOL}),
    FACTOR: frozenset({"+", "-", "*", "/", ")", EOF_SYMBOL}),
}

# Symbols after which a sign operator is in prefix position.
PREFIX_CONTEXT = frozenset({"(", "+", "-", "*", "/", UNARY_PLUS, UNARY_MINUS})

# Open parentheses plus pending prefix signs around any factor.
MAX_NESTING = 200


@dataclass(frozen=True)
class GrammarRule:
    lhs: str
    rhs: tuple[str, ...]
    reduce: Callable[[Sequence[StackItem]], Node]

    @property
    def label(self) -> str:
        return f"{self.lhs} → {' '.join(self.rhs)}"


def _number(children: Sequence[StackItem]) -> Node:
    token = children[0]
    if not isinstance(token, Token):
        return token
    return number_from_token(token)


def number_from_token(token: Token) -> Number:
    value = float(token.text)
    # Overlong digit strings parse to inf rather than raising.
    if not math.isfinite(value):
        raise ParserError(f"Invalid number: '{token.text}'", token.position)
    return Number(value=value)


def _group(children: Sequence[StackItem]) -> Node:
    return _node(children[1])


def _unary(operator: str) -> Callable[[Sequence[StackItem]], Node]:
    def build(children: Sequence[StackItem]) -> Node:
        return UnaryOp(operator=operator, operand=_node(children[1]))

    return build


def _binary(operator: str) -> Callable[[Sequence[StackItem]], Node]:
    def build(children: Sequence[StackItem]) -> Node:
        return BinaryOp(operator=operator, left=_node(children[0]), right=_node(children[2]))

    return build


def _passthrough(children: Sequence[StackItem]) -> Node:
    return _node(children[0])


def _node(item: StackItem) -> Node:
    if isinstance(item, Token):
        raise ParserError(f"Expected expression, got '{item.text}'", item.position)
    return item


RULES: tuple[GrammarRule, ...] = (
    GrammarRule(FACTOR, ("NUMBER",), _number),
    GrammarRule(FACTOR, ("(", EXPR, ")"), _group),
    GrammarRule(FACTOR, (UNARY_PLUS, FACTOR), _unary("+")),
    GrammarRule(FACTOR, (UNARY_MINUS, FACTOR), _unary("-")),
    GrammarRule(TERM, (TERM, "*", FACTOR), _binary("*")),
    GrammarRule(TERM, (TERM, "/", FACTOR), _binary("/")),
    GrammarRule(TERM, (FACTOR,), _passthrough),
    GrammarRule(EXPR, (EXPR, "+", TERM), _binary("+")),
    GrammarRule(EXPR, (EXPR, "-", TERM), _binary("-")),
    GrammarRule(EXPR, (TERM,), _passthrough),
)


def can_reduce_with_lookahead(lhs: str, lookahead: str) -> bool:
    if lookahead == EOF_SYMBOL:
        return True
    follow = FOLLOW.get(lhs)
    if follow is None:
        return True
    return lookahead in follow


def find_reduction(
    symbols: Sequence[str],
    lookahead: str,
    rules: Sequence[GrammarRule] = RULES,
) -> GrammarRule | None:
    """First rule whose rhs equals the top of ``symbols`` and whose lhs accepts ``lookahead``."""
    for rule in rules:
        width = len(rule.rhs)
        if len(symbols) < width:
            continue
        if tuple(symbols[-width:]) != rule.rhs:
            continue
        if can_reduce_with_lookahead(rule.lhs, lookahead):
            return rule
    return None


def shift_symbol(token: Token, stack_symbols: Sequence[str]) -> str:
    symbol = token.symbol
    if symbol in ("+", "-") and (not stack_symbols or stack_symbols[-1] in PREFIX_CONTEXT):
        return UNARY_PLUS if symbol == "+" else UNARY_MINUS
    return symbol


def check_nesting(tokens: Sequence[Token], limit: int = MAX_NESTING) -> None:
    """Reject input whose factors sit inside more than ``limit`` parentheses and prefix signs.

    Both parsers run this before parsing, so they fail on the same token with
    the same message.
    """
    depth = 0
    signs = 0
    outer: list[int] = []
    previous: str | None = None
    for token in tokens:
        symbol = token.symbol
        if symbol in ("+", "-") and (previous is None or previous in PREFIX_CONTEXT):
            signs += 1
            depth += 1
        elif symbol == "(":
            outer.append(signs)
            signs = 0
            depth += 1
        elif symbol == "NUMBER":
            depth -= signs
            signs = 0
        elif symbol == ")" and outer:
            depth -= signs + 1 + outer.pop()
            signs = 0
        if depth > limit:
            raise ParserError("Expression nested too deeply", token.position)
        previous = symbol
