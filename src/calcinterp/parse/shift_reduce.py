"""Bottom-up shift-reduce parser driven by :data:`calcinterp.parse.grammar.RULES`.

Each iteration either accepts, reduces by the first applicable rule, or shifts
the lookahead. Reductions are preferred over shifts.
"""
from __future__ import annotations

import logging
from typing import Sequence

from calcinterp.dsl.ast import Node
from calcinterp.dsl.tokens import Token, TokenKind, token_texts, validate_stream
from calcinterp.errors import ParserError
from calcinterp.parse.grammar import (
    EXPR,
    RULES,
    GrammarRule,
    StackItem,
    check_nesting,
    find_reduction,
    shift_symbol,
)
from calcinterp.parse.steps import ParseResult, StepAction, StepLog

logger = logging.getLogger(__name__)

STRATEGY = "bottom-up"
DEFAULT_MAX_ITERATIONS = 1000
ITERATIONS_PER_TOKEN = 8


def default_max_iterations(token_count: int) -> int:
    return max(DEFAULT_MAX_ITERATIONS, ITERATIONS_PER_TOKEN * token_count)


class _ShiftReduce:
    def __init__(
        self,
        tokens: Sequence[Token],
        log: StepLog,
        rules: Sequence[GrammarRule] = RULES,
    ) -> None:
        self.tokens = tokens
        self.rules = rules
        self.log = log
        self.values: list[StackItem] = []
        self.symbols: list[str] = []
        self.cursor = 0

    @property
    def lookahead(self) -> Token:
        return self.tokens[self.cursor]

    def _remaining(self) -> list[str]:
        return token_texts(self.tokens[self.cursor :])

    def should_reduce(self) -> GrammarRule | None:
        return find_reduction(self.symbols, self.lookahead.symbol, self.rules)

    def accepting(self) -> bool:
        return (
            len(self.symbols) == 1
            and self.symbols[0] == EXPR
            and self.lookahead.kind is TokenKind.EOF
        )

    def shift(self) -> None:
        token = self.lookahead
        self.symbols.append(shift_symbol(token, self.symbols))
        self.values.append(token)
        self.cursor += 1
        self.log.record(
            StepAction.SHIFT,
            f"Shift token: {token.text}",
            stack=self.symbols,
            remaining=self._remaining(),
        )

    def reduce(self, rule: GrammarRule) -> None:
        width = len(rule.rhs)
        children = self.values[-width:]
        del self.values[-width:]
        del self.symbols[-width:]
        self.values.append(rule.reduce(children))
        self.symbols.append(rule.lhs)
        self.log.record(
            StepAction.REDUCE,
            f"Reduce by rule: {rule.label}",
            stack=self.symbols,
            remaining=self._remaining(),
            rule=rule.label,
        )

    def run(self, max_iterations: int) -> Node:
        for _ in range(max_iterations):
            if self.accepting():
                self.log.record(StepAction.ACCEPT, "Accept: Parsing complete", stack=self.symbols)
                root = self.values[0]
                if isinstance(root, Token):
                    raise ParserError(f"Expected expression, got '{root.text}'", root.position)
                return root
            rule = self.should_reduce()
            if rule is not None:
                self.reduce(rule)
            elif self.lookahead.kind is not TokenKind.EOF:
                self.shift()
            else:
                raise ParserError("Syntax error: unexpected end of expression", self.lookahead.position)
        raise ParserError("Parser error: maximum iterations exceeded", self.lookahead.position)


def parse_bottom_up(
    tokens: Sequence[Token],
    *,
    max_iterations: int | None = None,
    rules: Sequence[GrammarRule] = RULES,
) -> ParseResult:
    validate_stream(tokens)
    check_nesting(tokens)
    cap = max_iterations if max_iterations is not None else default_max_iterations(len(tokens))
    log = StepLog()
    log.record(StepAction.PROCESS, "Starting bottom-up parsing...", remaining=token_texts(tokens))
    ast = _ShiftReduce(tokens, log, rules).run(cap)
    logger.debug("parse strategy=%s steps=%d cap=%d", STRATEGY, len(log), cap)
    return ParseResult(ast=ast, steps=log.snapshot(), strategy=STRATEGY)
