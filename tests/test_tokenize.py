from __future__ import annotations

import pytest

from calcinterp.dsl.tokens import Token, TokenKind, strip_eof, token_texts, tokenize
from calcinterp.errors import TokenizerError


def test_tokenize_simple_expression_positions() -> None:
    tokens = tokenize("2 + 3")
    assert tokens == [
        Token(TokenKind.NUMBER, "2", 0),
        Token(TokenKind.OPERATOR, "+", 2),
        Token(TokenKind.NUMBER, "3", 4),
        Token(TokenKind.EOF, "", 5),
    ]


def test_tokenize_trims_and_reports_trimmed_positions() -> None:
    tokens = tokenize("   (1.5*2)  ")
    assert [t.kind for t in tokens] == [
        TokenKind.LPAREN,
        TokenKind.NUMBER,
        TokenKind.OPERATOR,
        TokenKind.NUMBER,
        TokenKind.RPAREN,
        TokenKind.EOF,
    ]
    assert tokens[1].text == "1.5"
    assert tokens[1].position == 1
    assert tokens[-1].position == 7


def test_tokenize_leading_point_number() -> None:
    tokens = tokenize(".5")
    assert tokens[0] == Token(TokenKind.NUMBER, ".5", 0)


def test_tokenize_appends_exactly_one_eof() -> None:
    tokens = tokenize("1-2")
    assert sum(1 for t in tokens if t.kind is TokenKind.EOF) == 1
    assert tokens[-1].symbol == "$"
    assert len(strip_eof(tokens)) == 3
    assert token_texts(tokens) == ["1", "-", "2", "$"]


def test_tokenize_multiple_decimal_points() -> None:
    with pytest.raises(TokenizerError) as excinfo:
        tokenize("2..3")
    assert "multiple decimal points" in excinfo.value.message
    assert excinfo.value.position == 2
    assert excinfo.value.category == "TOKENIZER"


def test_tokenize_trailing_point_reports_number_start() -> None:
    with pytest.raises(TokenizerError) as excinfo:
        tokenize("3 + 5.")
    assert excinfo.value.message == "Invalid number format: '5.'"
    assert excinfo.value.position == 4


def test_tokenize_lone_point() -> None:
    with pytest.raises(TokenizerError):
        tokenize(".")


def test_tokenize_invalid_character() -> None:
    with pytest.raises(TokenizerError) as excinfo:
        tokenize("2 $ 3")
    assert excinfo.value.message == "Invalid character '$'"
    assert excinfo.value.position == 2


@pytest.mark.parametrize("source", ["", "   ", "\t\n"])
def test_tokenize_empty_expression(source: str) -> None:
    with pytest.raises(TokenizerError) as excinfo:
        tokenize(source)
    assert excinfo.value.message == "Empty expression"
    assert excinfo.value.position == 0


def test_tokenize_is_deterministic() -> None:
    assert tokenize("2 * (3 + 4) - 1") == tokenize("2 * (3 + 4) - 1")
