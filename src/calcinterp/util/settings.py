from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from calcinterp.parse.strategy import normalize_strategy

DEFAULT_STRATEGY = "top-down"


def load_config(path: str | Path | None) -> dict[str, Any]:
    if not path:
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"config must be a mapping: {path}")
    return cfg


def merge_config(cfg: dict[str, Any] | None, overrides: dict[str, Any]) -> dict[str, Any]:
    """Overrides win unless they are ``None``."""
    merged: dict[str, Any] = dict(cfg or {})
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value
    return merged


def resolve_strategy(cli_value: str | None, cfg: dict[str, Any] | None, default: str = DEFAULT_STRATEGY) -> str:
    if cli_value:
        return normalize_strategy(cli_value)
    if cfg and cfg.get("strategy"):
        return normalize_strategy(str(cfg["strategy"]))
    return normalize_strategy(default)


def resolve_max_iterations(cli_value: int | None, cfg: dict[str, Any] | None) -> int | None:
    """``None`` lets the shift-reduce parser size the cap from the token count."""
    if cli_value is not None:
        return int(cli_value)
    if cfg:
        parser_cfg = cfg.get("parser")
        if isinstance(parser_cfg, dict) and parser_cfg.get("max_iterations") is not None:
            return int(parser_cfg["max_iterations"])
        if cfg.get("max_iterations") is not None:
            return int(cfg["max_iterations"])
    return None


def resolve_flag(cli_value: bool | None, cfg: dict[str, Any] | None, key: str, default: bool) -> bool:
    if cli_value is not None:
        return bool(cli_value)
    if cfg and key in cfg and cfg[key] is not None:
        return bool(cfg[key])
    return default
