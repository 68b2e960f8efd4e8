from __future__ import annotations

from typing import List

import dash_bootstrap_components as dbc
from dash import dcc, html

from lv_controls.ui.ids import IDs


def build_controls_panel(list_names: List[str], default_list: str | None) -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader("Controls", className="fw-semibold"),
            dbc.CardBody(
                [
                    html.Label("List", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.LIST_SELECT,
                        options=[{"label": n, "value": n} for n in list_names],
                        value=default_list,
                        clearable=False,
                        className="mb-3",
                    ),
                    html.Label("Search", className="form-label"),
                    dbc.Input(
                        id=IDs.Control.SEARCH_INPUT,
                        type="search",
                        placeholder="Search...",
                        value="",
                        className="mb-3",
                    ),
                    html.Div(
                        id=IDs.Control.FILTER_CONTAINER,
                        children=[
                            html.Label("Filter", className="form-label"),
                            dcc.Dropdown(
                                id=IDs.Control.FILTER_SELECT,
                                options=[],
                                placeholder="No filter",
                                className="mb-3",
                            ),
                        ],
                    ),
                    html.Div(
                        id=IDs.Control.SORT_CONTAINER,
                        children=[
                            html.Label("Sort by", className="form-label"),
                            dcc.Dropdown(
                                id=IDs.Control.SORT_SELECT,
                                options=[],
                                clearable=False,
                                className="mb-3",
                            ),
                        ],
                    ),
                    dbc.Switch(
                        id=IDs.Control.OFFLINE_SWITCH,
                        label="Offline mode",
                        value=False,
                    ),
                    dbc.Alert(
                        id=IDs.Control.CONTROLS_ALERT,
                        color="danger",
                        is_open=False,
                        className="mt-3 mb-0",
                    ),
                ]
            ),
        ],
        className="lvc-sidebar",
    )
