from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import html

from lv_controls.config.model import GlobalConfig
from lv_controls.ui.ids import IDs


def build_navbar(global_config: GlobalConfig) -> dbc.Navbar:
    return dbc.Navbar(
        dbc.Container(
            [
                dbc.NavbarBrand(global_config.ui_title, className="fw-semibold"),
                html.Span(id=IDs.Control.STATUS_BAR, className="text-light small"),
            ],
            fluid=True,
        ),
        color="primary",
        dark=True,
        className="mb-3",
    )
