from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

from calcinterp.dsl.ast import Node


class StepAction(str, Enum):
    SHIFT = "shift"
    REDUCE = "reduce"
    ACCEPT = "accept"
    PROCESS = "process"


@dataclass(frozen=True)
class ParseStep:
    index: int
    action: StepAction
    stack: tuple[str, ...]
    remaining: tuple[str, ...]
    description: str
    rule: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "action": self.action.value,
            "stack": list(self.stack),
            "remaining": list(self.remaining),
            "rule": self.rule,
            "description": self.description,
        }


@dataclass
class StepLog:
    """Append-only step buffer owned by a single parse run."""

    steps: list[ParseStep] = field(default_factory=list)

    def record(
        self,
        action: StepAction,
        description: str,
        *,
        stack: Iterable[str] = (),
        remaining: Iterable[str] = (),
        rule: str | None = None,
    ) -> ParseStep:
        step = ParseStep(
            index=len(self.steps),
            action=action,
            stack=tuple(stack),
            remaining=tuple(remaining),
            description=description,
            rule=rule,
        )
        self.steps.append(step)
        return step

    def __len__(self) -> int:
        return len(self.steps)

    def snapshot(self) -> list[ParseStep]:
        return list(self.steps)


@dataclass(frozen=True)
class ParseResult:
    ast: Node
    steps: list[ParseStep]
    strategy: str


def count_actions(steps: Sequence[ParseStep], action: StepAction) -> int:
    return sum(1 for step in steps if step.action is action)


def format_step(step: ParseStep) -> str:
    stack = " ".join(step.stack) or "-"
    remaining = " ".join(step.remaining) or "-"
    rule = f" [{step.rule}]" if step.rule else ""
    return f"{step.index:>3} {step.action.value:<7} stack={stack} input={remaining}{rule} {step.description}"
