import calcinterp
from calcinterp.eval import compare
from calcinterp.interp import evaluator, pipeline
from calcinterp.parse import descent, grammar, shift_reduce


def test_imports_and_public_api() -> None:
    assert calcinterp.__version__
    assert compare is not None
    assert evaluator is not None
    assert pipeline is not None
    assert descent is not None
    assert shift_reduce is not None
    assert len(grammar.RULES) == 10

    tokens = calcinterp.tokenize("2 * (3 + 4) - 1")
    parsed = calcinterp.parse(tokens, "bottom-up")
    assert calcinterp.evaluate(parsed.ast) == 13.0
    assert calcinterp.evaluate_with_trace(parsed.ast).result == 13.0
    assert calcinterp.ast_to_string(parsed.ast).startswith("BinaryOp(-)")
