from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from calcinterp.util.numfmt import format_number


@dataclass(frozen=True)
class Number:
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"type": "Number", "value": self.value}


@dataclass(frozen=True)
class UnaryOp:
    operator: str
    operand: Node

    def to_dict(self) -> dict[str, Any]:
        return {"type": "UnaryOp", "operator": self.operator, "operand": self.operand.to_dict()}


@dataclass(frozen=True)
class BinaryOp:
    operator: str
    left: Node
    right: Node

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "BinaryOp",
            "operator": self.operator,
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }


Node = Union[Number, UnaryOp, BinaryOp]


def node_from_dict(data: dict[str, Any]) -> Node:
    kind = data.get("type")
    if kind == "Number":
        return Number(value=float(data["value"]))
    if kind == "UnaryOp":
        return UnaryOp(operator=data["operator"], operand=node_from_dict(data["operand"]))
    if kind == "BinaryOp":
        return BinaryOp(
            operator=data["operator"],
            left=node_from_dict(data["left"]),
            right=node_from_dict(data["right"]),
        )
    raise ValueError(f"unknown node type: {kind!r}")


def ast_to_string(node: Node, indent: int = 0) -> str:
    """Indented display dump of ``node``; not meant to be parsed back."""
    spaces = "  " * indent
    if isinstance(node, Number):
        return f"{spaces}Number({format_number(node.value)})"
    if isinstance(node, UnaryOp):
        return f"{spaces}UnaryOp({node.operator})\n{ast_to_string(node.operand, indent + 1)}"
    if isinstance(node, BinaryOp):
        return (
            f"{spaces}BinaryOp({node.operator})\n"
            f"{ast_to_string(node.left, indent + 1)}\n"
            f"{ast_to_string(node.right, indent + 1)}"
        )
    return f"{spaces}Unknown node type"


def ast_depth(node: Node) -> int:
    if isinstance(node, UnaryOp):
        return 1 + ast_depth(node.operand)
    if isinstance(node, BinaryOp):
        return 1 + max(ast_depth(node.left), ast_depth(node.right))
    return 1


def ast_equal(a: Node, b: Node) -> bool:
    # Dataclass equality treats 0.0 == -0.0; compare numeric leaves by repr instead.
    if isinstance(a, Number) and isinstance(b, Number):
        return repr(a.value) == repr(b.value)
    if isinstance(a, UnaryOp) and isinstance(b, UnaryOp):
        return a.operator == b.operator and ast_equal(a.operand, b.operand)
    if isinstance(a, BinaryOp) and isinstance(b, BinaryOp):
        return a.operator == b.operator and ast_equal(a.left, b.left) and ast_equal(a.right, b.right)
    return False
