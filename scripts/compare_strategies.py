from __future__ import annotations

import json
from pathlib import Path

import typer

from calcinterp.eval.compare import run_compare
from calcinterp.util.jsonl import read_expressions
from calcinterp.util.logging import configure_logging, get_logger
from calcinterp.util.settings import load_config, merge_config, resolve_max_iterations

app = typer.Typer(add_completion=False)


@app.command()
def main(
    config: str = "",
    expressions: str | None = typer.Option(
        None,
        "--expressions",
        help="Text file with one expression per line, or .jsonl rows with an 'expression' field.",
    ),
    out: str | None = typer.Option(None, "--out", "--out-path", help="Report output path (overrides config)."),
    max_iterations: int | None = typer.Option(None, "--max-iterations"),
) -> None:
    configure_logging()
    logger = get_logger(__name__)
    cfg = load_config(config)
    merged = merge_config(cfg, {"expressions_path": expressions, "out_path": out})
    expressions_path = merged.get("expressions_path")
    if not expressions_path:
        logger.error("compare_strategies needs --expressions or expressions_path in the config")
        raise SystemExit(2)
    out_path = str(merged.get("compare_out_path") or merged.get("out_path") or "out/compare.json")
    cap = resolve_max_iterations(max_iterations, cfg)
    logger.info("compare_strategies expressions=%s out=%s", expressions_path, out_path)
    try:
        report = run_compare(read_expressions(expressions_path), max_iterations=cap)
    except (OSError, ValueError):
        logger.exception("compare_strategies failed")
        raise SystemExit(1)
    out_file = Path(out_path)
    out_file.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(report, indent=2, sort_keys=True)
    out_file.write_text(payload)
    logger.info(
        "compare_strategies complete total=%d agreement=%.3f out=%s",
        report["total"],
        report["agreement_rate"],
        out_path,
    )
    if report["disagreements"]:
        logger.error("strategies disagreed on %d expressions", len(report["disagreements"]))
        raise SystemExit(1)


if __name__ == "__main__":
    app()
