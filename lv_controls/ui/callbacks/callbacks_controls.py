from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, State

from lv_controls.ui.ids import IDs
from lv_controls.ui.list_session import reapply_producers

if TYPE_CHECKING:
    from lv_controls.ui.config import AppConfig

logger = logging.getLogger(__name__)


def _style(flag: bool) -> dict:
    return {} if flag else {"display": "none"}


def register_controls_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Active list -> control options, visibility and alerts
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.FILTER_SELECT, "options"),
        Output(IDs.Control.FILTER_SELECT, "value"),
        Output(IDs.Control.FILTER_CONTAINER, "style"),
        Output(IDs.Control.SORT_SELECT, "options"),
        Output(IDs.Control.SORT_SELECT, "value"),
        Output(IDs.Control.SORT_CONTAINER, "style"),
        Output(IDs.Control.SEARCH_INPUT, "value"),
        Output(IDs.Control.SEARCH_INPUT, "disabled"),
        Output(IDs.Control.CONTROLS_ALERT, "children"),
        Output(IDs.Control.CONTROLS_ALERT, "is_open"),
        Input(IDs.Control.LIST_SELECT, "value"),
    )
    def update_controls_for_list(list_name: str | None):
        session = ctx.session(list_name)
        if session is None:
            return [], None, _style(False), [], None, _style(False), "", True, "", False

        filter_options = []
        filter_value = None
        if session.filter is not None:
            filter_options = [{"label": o.caption, "value": i} for i, o in enumerate(session.filter.options)]
            filter_value = session.filter.selected_index

        sort_options = []
        sort_value = None
        if session.sort is not None:
            sort_options = [{"label": o.caption, "value": i} for i, o in enumerate(session.sort.options)]
            sort_value = session.sort.selected_index

        search_text = session.search.search_text if session.search is not None else ""
        alert = " ".join(session.alerts)

        return (
            filter_options,
            filter_value,
            _style(session.filter is not None),
            sort_options,
            sort_value,
            _style(session.sort is not None),
            search_text,
            session.search is None,
            alert,
            bool(alert),
        )

    # ---------------------------------------------------------
    # Producers -> scheduler
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.STATUS_BAR, "children", allow_duplicate=True),
        Input(IDs.Control.SEARCH_INPUT, "value"),
        State(IDs.Control.LIST_SELECT, "value"),
        prevent_initial_call=True,
    )
    def apply_search(search_text: str | None, list_name: str | None):
        session = ctx.session(list_name)
        if session is None or session.search is None:
            return dash.no_update
        with ctx.lock:
            session.search.apply_search(search_text or "")
        return f"Searching '{search_text}'" if search_text else "Search cleared"

    @app.callback(
        Output(IDs.Control.STATUS_BAR, "children", allow_duplicate=True),
        Input(IDs.Control.FILTER_SELECT, "value"),
        State(IDs.Control.LIST_SELECT, "value"),
        prevent_initial_call=True,
    )
    def apply_filter(index: int | None, list_name: str | None):
        session = ctx.session(list_name)
        if session is None or session.filter is None or index == session.filter.selected_index:
            return dash.no_update
        with ctx.lock:
            session.filter.select(index)
        if index is None:
            return "Filter cleared"
        return f"Filter: {session.filter.options[index].caption}"

    @app.callback(
        Output(IDs.Control.STATUS_BAR, "children", allow_duplicate=True),
        Input(IDs.Control.SORT_SELECT, "value"),
        State(IDs.Control.LIST_SELECT, "value"),
        prevent_initial_call=True,
    )
    def apply_sort(index: int | None, list_name: str | None):
        session = ctx.session(list_name)
        if session is None or session.sort is None or index is None or index == session.sort.selected_index:
            return dash.no_update
        with ctx.lock:
            session.sort.select(index)
        return f"Sorted by {session.sort.options[index].caption}"

    # ---------------------------------------------------------
    # Connectivity mode
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.STATUS_BAR, "children", allow_duplicate=True),
        Input(IDs.Control.OFFLINE_SWITCH, "value"),
        prevent_initial_call=True,
    )
    def toggle_offline(offline: bool | None):
        with ctx.lock:
            ctx.connectivity.offline = bool(offline)
            for session in ctx.sessions.values():
                reapply_producers(session)
        logger.info("Connectivity mode changed", extra={"offline": bool(offline)})
        return "Offline mode" if offline else "Online mode"
