from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: int = logging.INFO, stderr: bool = True) -> None:
    console = Console(stderr=stderr)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    if isinstance(level, int):
        return level
    raise ValueError(f"unknown log level: {name}")


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)
