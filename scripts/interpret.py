from __future__ import annotations

import json

import typer

from calcinterp.errors import InterpreterError, format_error
from calcinterp.interp.pipeline import interpret
from calcinterp.parse.steps import ParseStep, StepAction, format_step
from calcinterp.util.logging import configure_logging, get_logger, level_from_name
from calcinterp.util.numfmt import format_number
from calcinterp.util.settings import (
    load_config,
    resolve_flag,
    resolve_max_iterations,
    resolve_strategy,
)

app = typer.Typer(add_completion=False)


def _print_steps(rows: list[dict]) -> None:
    for row in rows:
        step = ParseStep(
            index=int(row["index"]),
            action=StepAction(row["action"]),
            stack=tuple(row["stack"]),
            remaining=tuple(row["remaining"]),
            description=str(row["description"]),
            rule=row.get("rule"),
        )
        print(format_step(step))


@app.command()
def main(
    expression: str = typer.Option(..., "--expression", "-e", help="Arithmetic expression to interpret."),
    config: str = "",
    strategy: str | None = typer.Option(None, "--strategy", help="top-down or bottom-up (overrides config)."),
    max_iterations: int | None = typer.Option(None, "--max-iterations"),
    show_steps: bool | None = typer.Option(None, "--steps/--no-steps"),
    show_trace: bool | None = typer.Option(None, "--trace/--no-trace"),
    as_json: bool = typer.Option(False, "--json", help="Print the full report as JSON."),
    log_level: str = typer.Option("WARNING", "--log-level"),
) -> None:
    configure_logging(level_from_name(log_level))
    logger = get_logger(__name__)
    try:
        cfg = load_config(config)
        resolved_strategy = resolve_strategy(strategy, cfg)
        cap = resolve_max_iterations(max_iterations, cfg)
    except (OSError, ValueError):
        logger.exception("interpret setup failed")
        raise SystemExit(1)
    logger.info("interpret strategy=%s expression=%r max_iterations=%s", resolved_strategy, expression, cap)
    try:
        report = interpret(expression, resolved_strategy, max_iterations=cap)
    except InterpreterError as exc:
        logger.error("interpret failed category=%s position=%d", exc.category, exc.position)
        print(format_error(exc, expression.strip()))
        raise SystemExit(1)
    if as_json:
        print(json.dumps(report.model_dump(), indent=2, sort_keys=True))
        return
    print(f"Result: {format_number(report.result)}")
    print()
    print(report.parse_tree)
    if resolve_flag(show_steps, cfg, "show_steps", False):
        print()
        print(f"Parsing steps ({report.strategy}):")
        _print_steps(report.parsing_steps)
    if resolve_flag(show_trace, cfg, "show_trace", False):
        print()
        print("Evaluation:")
        for line in report.evaluation_steps:
            print(line)


if __name__ == "__main__":
    app()
