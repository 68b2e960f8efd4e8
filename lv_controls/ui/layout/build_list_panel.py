from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dash_table, html

from lv_controls.ui.ids import IDs
from lv_controls.ui.list_session import DEFAULT_PAGE_SIZE


def build_list_panel() -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader("Results", className="fw-semibold"),
            dbc.CardBody(
                [
                    html.Code(id=IDs.Control.QUERY_TEXT, className="d-block mb-2 text-muted small"),
                    html.Div(
                        id=IDs.Control.LIST_WRAPPER,
                        children=dash_table.DataTable(
                            id=IDs.Control.LIST_TABLE,
                            data=[],
                            columns=[],
                            page_action="custom",
                            page_current=0,
                            page_size=DEFAULT_PAGE_SIZE,
                            style_table={"overflowX": "auto"},
                        ),
                    ),
                ]
            ),
        ],
        className="lvc-list-card",
    )
