from __future__ import annotations

import pytest

from calcinterp.dsl.ast import BinaryOp, Number, UnaryOp
from calcinterp.dsl.tokens import Token, TokenKind, tokenize
from calcinterp.errors import ParserError
from calcinterp.parse.grammar import (
    FACTOR,
    RULES,
    UNARY_MINUS,
    GrammarRule,
    can_reduce_with_lookahead,
    find_reduction,
    shift_symbol,
)
from calcinterp.parse.shift_reduce import default_max_iterations, parse_bottom_up
from calcinterp.parse.steps import StepAction, count_actions


def test_bottom_up_steps_for_single_number() -> None:
    result = parse_bottom_up(tokenize("2"))
    assert result.strategy == "bottom-up"
    actions = [s.action for s in result.steps]
    assert actions == [
        StepAction.PROCESS,
        StepAction.SHIFT,
        StepAction.REDUCE,
        StepAction.REDUCE,
        StepAction.REDUCE,
        StepAction.ACCEPT,
    ]
    assert [s.rule for s in result.steps if s.rule] == ["F → NUMBER", "T → F", "E → T"]
    assert result.steps[1].stack == ("NUMBER",)
    assert result.steps[1].remaining == ("$",)
    assert result.steps[-1].stack == ("E",)


def test_bottom_up_binary_minus_is_not_unary() -> None:
    ast = parse_bottom_up(tokenize("2 - 3")).ast
    assert ast == BinaryOp("-", Number(2.0), Number(3.0))


def test_bottom_up_prefix_minus_after_operator() -> None:
    result = parse_bottom_up(tokenize("2 * -3"))
    assert result.ast == BinaryOp("*", Number(2.0), UnaryOp("-", Number(3.0)))
    shifted = [s.stack[-1] for s in result.steps if s.action is StepAction.SHIFT]
    assert shifted == ["NUMBER", "*", UNARY_MINUS, "NUMBER"]


def test_bottom_up_term_folds_before_promotion() -> None:
    ast = parse_bottom_up(tokenize("2 + 3 * 4")).ast
    assert ast == BinaryOp("+", Number(2.0), BinaryOp("*", Number(3.0), Number(4.0)))


def test_bottom_up_left_associative_division() -> None:
    ast = parse_bottom_up(tokenize("8 / 4 / 2")).ast
    assert ast == BinaryOp("/", BinaryOp("/", Number(8.0), Number(4.0)), Number(2.0))


def test_bottom_up_ends_with_single_accept_and_bounded_steps() -> None:
    for expr in ["1", "2 + 3 * 4", "(5 + 3) * 2", "-(-(1)) - -2", "((((7))))", "1 + 2 + 3 + 4 + 5 + 6"]:
        tokens = tokenize(expr)
        steps = parse_bottom_up(tokens).steps
        assert steps[-1].action is StepAction.ACCEPT
        assert count_actions(steps, StepAction.ACCEPT) == 1
        assert len(steps) <= 5 * len(tokens) + 2


def test_bottom_up_unterminated_paren() -> None:
    with pytest.raises(ParserError) as excinfo:
        parse_bottom_up(tokenize("(2 + 3"))
    assert excinfo.value.message == "Syntax error: unexpected end of expression"
    assert excinfo.value.position == 6


def test_bottom_up_trailing_number_fails() -> None:
    with pytest.raises(ParserError):
        parse_bottom_up(tokenize("2 3"))


def test_bottom_up_empty_stream() -> None:
    with pytest.raises(ParserError) as excinfo:
        parse_bottom_up([Token(TokenKind.EOF, "", 0)])
    assert excinfo.value.message == "Empty expression"


def test_bottom_up_iteration_cap() -> None:
    with pytest.raises(ParserError) as excinfo:
        parse_bottom_up(tokenize("1 + 2 + 3"), max_iterations=3)
    assert excinfo.value.message == "Parser error: maximum iterations exceeded"


def test_bottom_up_cap_stops_defective_table() -> None:
    looping = (RULES[0], GrammarRule(FACTOR, (FACTOR,), lambda children: children[0]))
    with pytest.raises(ParserError) as excinfo:
        parse_bottom_up(tokenize("2"), max_iterations=50, rules=looping)
    assert "maximum iterations" in excinfo.value.message


def test_default_cap_scales_with_tokens() -> None:
    assert default_max_iterations(3) == 1000
    assert default_max_iterations(1000) == 8000


def test_long_expression_stays_under_default_cap() -> None:
    expr = " + ".join(["(1 * 2)"] * 200)
    result = parse_bottom_up(tokenize(expr))
    assert result.steps[-1].action is StepAction.ACCEPT


def test_follow_sets() -> None:
    assert can_reduce_with_lookahead("E", ")")
    assert not can_reduce_with_lookahead("E", "*")
    assert can_reduce_with_lookahead("T", "*")
    assert not can_reduce_with_lookahead("F", "NUMBER")
    assert can_reduce_with_lookahead("E", "$")


def test_find_reduction_first_match_wins() -> None:
    rule = find_reduction(["T", "*", "F"], "$")
    assert rule is not None
    assert rule.label == "T → T * F"
    assert find_reduction(["E", "+", "T"], "*") is None
    assert find_reduction([], "$") is None


def test_shift_symbol_prefix_context() -> None:
    minus = Token(TokenKind.OPERATOR, "-", 0)
    plus = Token(TokenKind.OPERATOR, "+", 0)
    assert shift_symbol(minus, []) == "u-"
    assert shift_symbol(minus, ["E"]) == "-"
    assert shift_symbol(plus, ["("]) == "u+"
    assert shift_symbol(minus, ["u-"]) == "u-"
    assert shift_symbol(Token(TokenKind.NUMBER, "1", 0), []) == "NUMBER"
