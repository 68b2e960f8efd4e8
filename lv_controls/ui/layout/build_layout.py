from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc

from lv_controls.ui.ids import IDs
from lv_controls.ui.layout.build_controls_panel import build_controls_panel
from lv_controls.ui.layout.build_list_panel import build_list_panel
from lv_controls.ui.layout.build_navbar import build_navbar

if TYPE_CHECKING:
    from lv_controls.ui.config import AppConfig

# How often the browser asks the server to advance the timer service
TIMER_INTERVAL_MS = 100


def build_layout(ctx: AppConfig):
    return dbc.Container(
        fluid=True,
        className="lvc-root",
        children=[
            build_navbar(ctx.global_config),
            dcc.Interval(id=IDs.Control.TIMER_INTERVAL, interval=TIMER_INTERVAL_MS),
            dbc.Row(
                [
                    dbc.Col(build_controls_panel(ctx.list_names, ctx.default_list), md=3),
                    dbc.Col(build_list_panel(), md=9),
                ]
            ),
        ],
    )
