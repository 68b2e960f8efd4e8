from __future__ import annotations

import logging
from pathlib import Path

import dash_bootstrap_components as dbc
from dash import Dash

from lv_controls.config.config_loader import load_list_data, load_list_registry
from lv_controls.core.dom import DomNode
from lv_controls.core.exceptions import ConfigError
from lv_controls.core.registry import SchedulerRegistry
from lv_controls.core.timers import ManualTimerService
from lv_controls.ui.callbacks.callbacks_controls import register_controls_callbacks
from lv_controls.ui.callbacks.callbacks_render import register_render_callbacks
from lv_controls.ui.config import AppConfig
from lv_controls.ui.layout.build_layout import build_layout
from lv_controls.ui.list_session import ConnectivitySwitch, TimerPump, build_list_session

logger = logging.getLogger(__name__)


def build_app_config(config_root: Path | str = Path("config")) -> AppConfig:
    config_root = Path(config_root)

    # 1) Load Config
    global_config, cfg_by_name = load_list_registry(config_root)
    if not cfg_by_name:
        raise RuntimeError("No list view configs were loaded from config")

    # 2) Scheduling services
    timers = ManualTimerService()
    connectivity = ConnectivitySwitch()
    registry = SchedulerRegistry.from_settings(global_config.helper, timers, is_offline=connectivity)

    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        timers=timers,
        registry=registry,
        connectivity=connectivity,
    )

    # 3) One list view + producers per config
    page_root = DomNode("body")
    for name, cfg in cfg_by_name.items():
        try:
            data = load_list_data(cfg, global_config, config_root)
        except ConfigError as e:
            logger.error("Skipping list view", extra={"list": name, "error": str(e)})
            continue
        ctx.sessions[name] = build_list_session(cfg, data, page_root, registry, connectivity)

    # 4) Choose Default List
    default_list = global_config.default_list
    if default_list not in ctx.sessions:
        default_list = next(iter(ctx.sessions), None)
    ctx.default_list = default_list

    ctx.validate()
    return ctx


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    ctx = build_app_config(config_root)
    pump = TimerPump(ctx.timers)

    assets_path = Path(__file__).parent / "assets"

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        assets_folder=str(assets_path),
    )
    app.title = ctx.global_config.ui_title
    app.layout = build_layout(ctx)

    # Register callbacks
    register_controls_callbacks(app, ctx)
    register_render_callbacks(app, ctx, pump)

    return app
