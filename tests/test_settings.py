from __future__ import annotations

from pathlib import Path

import pytest

from calcinterp.util.settings import (
    load_config,
    merge_config,
    resolve_flag,
    resolve_max_iterations,
    resolve_strategy,
)


def test_default_strategy_without_config() -> None:
    assert resolve_strategy(None, {}) == "top-down"


def test_cli_strategy_overrides_config() -> None:
    assert resolve_strategy("bottom-up", {"strategy": "top-down"}) == "bottom-up"
    assert resolve_strategy(None, {"strategy": "bottom_up"}) == "bottom-up"


def test_unknown_strategy_in_config() -> None:
    with pytest.raises(ValueError):
        resolve_strategy(None, {"strategy": "earley"})


def test_max_iterations_resolution() -> None:
    assert resolve_max_iterations(None, {}) is None
    assert resolve_max_iterations(None, {"max_iterations": 64}) == 64
    assert resolve_max_iterations(None, {"parser": {"max_iterations": 32}, "max_iterations": 64}) == 32
    assert resolve_max_iterations(128, {"parser": {"max_iterations": 32}}) == 128


def test_resolve_flag() -> None:
    assert resolve_flag(None, {"show_trace": True}, "show_trace", False) is True
    assert resolve_flag(False, {"show_trace": True}, "show_trace", False) is False
    assert resolve_flag(None, {}, "show_steps", True) is True


def test_load_and_merge_config(tmp_path: Path) -> None:
    cfg_path = tmp_path / "interpret.yaml"
    cfg_path.write_text("strategy: bottom-up\nout_path: out/a.json\n")
    cfg = load_config(cfg_path)
    assert cfg["strategy"] == "bottom-up"
    merged = merge_config(cfg, {"out_path": None, "expressions_path": "x.txt"})
    assert merged["out_path"] == "out/a.json"
    assert merged["expressions_path"] == "x.txt"
    assert load_config("") == {}


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    cfg_path = tmp_path / "bad.yaml"
    cfg_path.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        load_config(cfg_path)
