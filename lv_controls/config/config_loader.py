from __future__ import annotations

import dataclasses
import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Tuple

import pandas as pd

from lv_controls.config.model import GlobalConfig, HelperSettings, ListViewConfig
from lv_controls.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEBOUNCE_ENV_VAR = "LV_CONTROLS_DEBOUNCE_MS"


def _apply_env_overrides(settings: HelperSettings) -> HelperSettings:
    raw = os.getenv(DEBOUNCE_ENV_VAR)
    if raw is None or not raw.strip():
        return settings
    try:
        debounce_ms = int(raw)
    except ValueError:
        raise ConfigError(f"{DEBOUNCE_ENV_VAR} must be an integer, got {raw!r}")
    if debounce_ms < 0:
        raise ConfigError(f"{DEBOUNCE_ENV_VAR} must not be negative")
    return dataclasses.replace(settings, debounce_ms=debounce_ms)


def load_global_config(root: Path) -> GlobalConfig:
    """
    Load configuration from a directory using the multi-file layout:

        root/global.json
        root/lists/*.json
    """
    root = Path(root)
    logger.info("Loading global config", extra={"config_root": str(root)})

    global_path = root / "global.json"
    if not global_path.is_file():
        # Fallback to defaults if global.json is missing
        raw_global = {}
    else:
        with global_path.open() as f:
            raw_global = json.load(f)

    lists_dir = root / "lists"
    lists: List[ListViewConfig] = []

    if lists_dir.is_dir():
        logger.info(f"Scanning for list view configurations in: {lists_dir}")
        files = sorted(lists_dir.glob("*.json"))

        for idx, config_file in enumerate(files):
            # Ignore macOS 'Apple Double' files
            if config_file.name.startswith("._"):
                continue

            logger.info(f"Loading list view config: {config_file.name}")
            try:
                with config_file.open() as f:
                    raw = json.load(f)
                lists.append(ListViewConfig.from_raw(raw, source_path=config_file, index=idx))
            except (OSError, ValueError, ConfigError) as e:
                logger.error(f"Failed to load {config_file.name}: {e}")
    else:
        logger.warning(f"Lists directory not found at: {lists_dir}")

    data_root_raw = raw_global.get("data_root")
    data_root = Path(data_root_raw) if data_root_raw else None
    if data_root and not data_root.is_absolute():
        data_root = (root / data_root).resolve()

    helper = _apply_env_overrides(HelperSettings.from_dict(raw_global.get("helper")))

    return GlobalConfig(
        ui_title=raw_global.get("ui_title", "List View Controls"),
        default_list=raw_global.get("default_list"),
        data_root=data_root,
        helper=helper,
        lists=lists,
    )


def load_list_registry(root: Path) -> Tuple[GlobalConfig, Dict[str, ListViewConfig]]:
    """
    Load global config + list view config mapping (keyed by list name).
    """
    global_config = load_global_config(root)

    cfg_by_name: Dict[str, ListViewConfig] = {}
    for cfg in global_config.lists:
        if cfg.name in cfg_by_name:
            logger.warning(f"Duplicate list view name ignored: {cfg.name}")
            continue
        cfg_by_name[cfg.name] = cfg

    return global_config, cfg_by_name


def load_list_data(cfg: ListViewConfig, global_config: GlobalConfig, root: Path) -> pd.DataFrame:
    path = global_config.resolve_file(cfg, Path(root))
    if not path.is_file():
        raise ConfigError(f"Data file for list '{cfg.name}' not found at {path}")

    df = pd.read_csv(path)
    if cfg.columns:
        missing = [c for c in cfg.columns if c not in df.columns]
        if missing:
            raise ConfigError(f"List '{cfg.name}' references unknown columns: {', '.join(missing)}")
        df = df[cfg.columns]

    logger.info("Loaded list data", extra={"list": cfg.name, "rows": len(df), "path": str(path)})
    return df
