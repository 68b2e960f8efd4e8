from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import dash
from dash import Input, Output

from lv_controls.ui.ids import IDs

if TYPE_CHECKING:
    from lv_controls.ui.config import AppConfig
    from lv_controls.ui.list_session import ListSession, TimerPump

logger = logging.getLogger(__name__)

WRAPPER_CLASS = "lvc-list-wrapper"


def describe_constraints(constraints) -> str:
    if isinstance(constraints, str):
        return constraints or "(no filter)"
    if not constraints:
        return "(no filter)"
    return " and ".join(repr(c) for c in constraints)


@dataclass
class ListSnapshot:
    """What the results table shows for one list session and page."""
    records: List[Dict[str, Any]]
    columns: List[Dict[str, str]]
    class_name: str
    status: str
    page_current: int
    page_count: int
    page_size: int


def snapshot_list(session: ListSession, page_current: Optional[int]) -> ListSnapshot:
    """
    Render the list view's current page.

    `page_current` is the DataTable's zero-based page index; it is clamped to
    the pages the current rows actually have.
    """
    list_view = session.list_view
    page_count = list_view.page_count
    page = min(max(1, (page_current or 0) + 1), page_count)
    rows = list_view.visible_rows(page)

    request = session.scheduler.last_request if session.scheduler is not None else None
    if request is None or request.is_unfiltered:
        query = "(no filter)"
    else:
        query = describe_constraints(request.constraints)
    status = f"{query} · {list_view.row_count} rows"
    if session.scheduler is not None and session.scheduler.is_busy:
        status += " · refreshing"

    return ListSnapshot(
        records=rows.to_dict("records"),
        columns=[{"name": c, "id": c} for c in list_view.rows.columns],
        class_name=f"{WRAPPER_CLASS} {list_view.dom_node.class_name}".strip(),
        status=status,
        page_current=page - 1,
        page_count=page_count,
        page_size=list_view.page_size or max(1, list_view.row_count),
    )


def register_render_callbacks(app: dash.Dash, ctx: AppConfig, pump: TimerPump) -> None:
    # ---------------------------------------------------------
    # Timer tick: advance the schedulers, then show the active page
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.LIST_TABLE, "data"),
        Output(IDs.Control.LIST_TABLE, "columns"),
        Output(IDs.Control.LIST_TABLE, "page_current"),
        Output(IDs.Control.LIST_TABLE, "page_count"),
        Output(IDs.Control.LIST_TABLE, "page_size"),
        Output(IDs.Control.LIST_WRAPPER, "className"),
        Output(IDs.Control.QUERY_TEXT, "children"),
        Input(IDs.Control.TIMER_INTERVAL, "n_intervals"),
        Input(IDs.Control.LIST_SELECT, "value"),
        Input(IDs.Control.LIST_TABLE, "page_current"),
    )
    def refresh_list(_n_intervals, list_name: str | None, page_current: int | None):
        with ctx.lock:
            pump.pump()

            session = ctx.session(list_name)
            if session is None:
                return [], [], 0, 1, 1, WRAPPER_CLASS, "No list selected."

            snapshot = snapshot_list(session, page_current)

        return (
            snapshot.records,
            snapshot.columns,
            snapshot.page_current,
            snapshot.page_count,
            snapshot.page_size,
            snapshot.class_name,
            snapshot.status,
        )
