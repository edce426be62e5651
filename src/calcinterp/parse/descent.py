"""Top-down recursive-descent parser.

One function per precedence level: ``expr`` handles ``+ -``, ``term`` handles
``* /`` and ``factor`` handles numbers, parentheses and prefix signs. Binary
operators are folded left-to-right inside a loop; prefix signs recurse into
``factor``.
"""
from __future__ import annotations

import logging
from typing import Sequence

from calcinterp.dsl.ast import BinaryOp, Node, UnaryOp
from calcinterp.dsl.tokens import Token, TokenKind, token_texts, validate_stream
from calcinterp.errors import ParserError
from calcinterp.parse.grammar import check_nesting, number_from_token
from calcinterp.parse.steps import ParseResult, StepAction, StepLog
from calcinterp.util.numfmt import format_number

logger = logging.getLogger(__name__)

STRATEGY = "top-down"


class _Descent:
    def __init__(self, tokens: Sequence[Token], log: StepLog) -> None:
        self.tokens = tokens
        self.index = 0
        self.log = log

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _remaining(self) -> list[str]:
        return token_texts(self.tokens[self.index :])

    def _step(self, action: StepAction, description: str, rule: str | None = None) -> None:
        self.log.record(action, description, remaining=self._remaining(), rule=rule)

    def eat(self, kind: TokenKind) -> Token:
        token = self.current
        if token.kind is not kind:
            raise ParserError(f"Expected {kind.value}, got {token.kind.value}", token.position)
        if self.index < len(self.tokens) - 1:
            self.index += 1
        return token

    def _at_operator(self, operators: str) -> bool:
        token = self.current
        return token.kind is TokenKind.OPERATOR and token.text in operators

    def factor(self) -> Node:
        token = self.current
        self._step(StepAction.PROCESS, f"Processing factor: {token.text or '$'}")
        if self._at_operator("+-"):
            self.eat(TokenKind.OPERATOR)
            operand = self.factor()
            self._step(StepAction.REDUCE, f"Created unary operation: {token.text}")
            return UnaryOp(operator=token.text, operand=operand)
        if token.kind is TokenKind.NUMBER:
            self.eat(TokenKind.NUMBER)
            number = number_from_token(token)
            self._step(StepAction.REDUCE, f"Created number node: {format_number(number.value)}")
            return number
        if token.kind is TokenKind.LPAREN:
            self._step(StepAction.PROCESS, "Processing parenthesized expression")
            self.eat(TokenKind.LPAREN)
            node = self.expr()
            self.eat(TokenKind.RPAREN)
            self._step(StepAction.REDUCE, "Completed parenthesized expression")
            return node
        if token.kind is TokenKind.EOF:
            raise ParserError("Unexpected end of expression", token.position)
        raise ParserError(f"Unexpected token: {token.kind.value} '{token.text}'", token.position)

    def term(self) -> Node:
        self._step(StepAction.PROCESS, "Processing term")
        node = self.factor()
        while self._at_operator("*/"):
            op = self.eat(TokenKind.OPERATOR).text
            right = self.factor()
            node = BinaryOp(operator=op, left=node, right=right)
            self._step(StepAction.REDUCE, f"Created binary operation: {op}", rule=f"T → T {op} F")
        return node

    def expr(self) -> Node:
        self._step(StepAction.PROCESS, "Processing expression")
        node = self.term()
        while self._at_operator("+-"):
            op = self.eat(TokenKind.OPERATOR).text
            right = self.term()
            node = BinaryOp(operator=op, left=node, right=right)
            self._step(StepAction.REDUCE, f"Created binary operation: {op}", rule=f"E → E {op} T")
        return node


def parse_top_down(tokens: Sequence[Token]) -> ParseResult:
    validate_stream(tokens)
    check_nesting(tokens)
    log = StepLog()
    log.record(StepAction.PROCESS, "Starting top-down parsing...", remaining=token_texts(tokens))
    parser = _Descent(tokens, log)
    ast = parser.expr()
    trailing = parser.current
    if trailing.kind is not TokenKind.EOF:
        raise ParserError(
            f"Unexpected token at end: {trailing.kind.value} '{trailing.text}'",
            trailing.position,
        )
    log.record(StepAction.ACCEPT, "Parsing complete", stack=("E",))
    logger.debug("parse strategy=%s steps=%d", STRATEGY, len(log))
    return ParseResult(ast=ast, steps=log.snapshot(), strategy=STRATEGY)
