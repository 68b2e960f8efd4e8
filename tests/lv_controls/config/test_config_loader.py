from __future__ import annotations

import json
from pathlib import Path

import pytest

from lv_controls.config.config_loader import (
    DEBOUNCE_ENV_VAR,
    load_global_config,
    load_list_data,
    load_list_registry,
)
from lv_controls.config.model import HelperSettings
from lv_controls.core.exceptions import ConfigError


def _write_config(root: Path, helper: dict | None = None) -> Path:
    (root / "lists").mkdir(parents=True)
    (root / "data").mkdir()
    (root / "global.json").write_text(
        json.dumps({"ui_title": "Shop", "data_root": "data", "helper": helper or {"debounce_ms": 120}})
    )
    (root / "lists" / "a_products.json").write_text(
        json.dumps({"name": "Products", "entity": "Shop.Product", "file": "products.csv", "columns": ["Name", "Price"]})
    )
    (root / "lists" / "b_duplicate.json").write_text(
        json.dumps({"name": "Products", "entity": "Shop.Other", "file": "other.csv"})
    )
    (root / "lists" / "c_broken.json").write_text("{not json")
    (root / "lists" / "._d_hidden.json").write_text("garbage")
    (root / "data" / "products.csv").write_text("Name,Price,Stock\nHammer,14.5,3\nWhisk,4.2,9\n")
    return root


def test_load_global_config_reads_settings_and_lists(tmp_path, monkeypatch):
    monkeypatch.delenv(DEBOUNCE_ENV_VAR, raising=False)
    root = _write_config(tmp_path / "config")

    cfg = load_global_config(root)

    assert cfg.ui_title == "Shop"
    assert cfg.helper.debounce_ms == 120
    assert cfg.helper.max_ascent == 5
    assert cfg.data_root == (root / "data").resolve()
    assert [c.name for c in cfg.lists] == ["Products", "Products"]


def test_load_list_registry_keeps_first_duplicate(tmp_path, monkeypatch):
    monkeypatch.delenv(DEBOUNCE_ENV_VAR, raising=False)
    root = _write_config(tmp_path / "config")

    _, cfg_by_name = load_list_registry(root)

    assert list(cfg_by_name) == ["Products"]
    assert cfg_by_name["Products"].entity == "Shop.Product"


def test_missing_global_json_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv(DEBOUNCE_ENV_VAR, raising=False)

    cfg = load_global_config(tmp_path)

    assert cfg.ui_title == "List View Controls"
    assert cfg.helper == HelperSettings()
    assert cfg.lists == []


def test_debounce_env_override(tmp_path, monkeypatch):
    root = _write_config(tmp_path / "config")

    monkeypatch.setenv(DEBOUNCE_ENV_VAR, "5")
    assert load_global_config(root).helper.debounce_ms == 5

    monkeypatch.setenv(DEBOUNCE_ENV_VAR, "soon")
    with pytest.raises(ConfigError):
        load_global_config(root)


def test_helper_settings_validation():
    assert HelperSettings.from_dict({"debounce_ms": 10, "unknown": 1}).debounce_ms == 10

    with pytest.raises(ConfigError):
        HelperSettings.from_dict({"debounce_ms": -1})
    with pytest.raises(ConfigError):
        HelperSettings.from_dict({"max_ascent": 0})


def test_helper_settings_reject_wrong_value_types():
    with pytest.raises(ConfigError, match="debounce_ms"):
        HelperSettings.from_dict({"debounce_ms": "50"})
    with pytest.raises(ConfigError, match="max_ascent"):
        HelperSettings.from_dict({"max_ascent": True})
    with pytest.raises(ConfigError, match="exclusive_sorting"):
        HelperSettings.from_dict({"exclusive_sorting": "yes"})

    assert HelperSettings.from_dict({"offline_or_groups": False}).offline_or_groups is False


def test_load_list_data_selects_configured_columns(tmp_path, monkeypatch):
    monkeypatch.delenv(DEBOUNCE_ENV_VAR, raising=False)
    root = _write_config(tmp_path / "config")
    global_config, cfg_by_name = load_list_registry(root)

    df = load_list_data(cfg_by_name["Products"], global_config, root)

    assert list(df.columns) == ["Name", "Price"]
    assert len(df) == 2


def test_load_list_data_reports_missing_file(tmp_path, monkeypatch):
    monkeypatch.delenv(DEBOUNCE_ENV_VAR, raising=False)
    root = _write_config(tmp_path / "config")
    global_config = load_global_config(root)
    duplicate = global_config.lists[1]

    with pytest.raises(ConfigError, match="not found"):
        load_list_data(duplicate, global_config, root)
