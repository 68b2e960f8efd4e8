from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, TypeVar

import pandas as pd

from lv_controls.config.model import ListViewConfig
from lv_controls.core.constraints import OfflineConstraint
from lv_controls.core.dom import DomNode
from lv_controls.core.list_view import DataFrameListView
from lv_controls.core.query import dataframe_query_source
from lv_controls.core.registry import SchedulerRegistry
from lv_controls.core.scheduler import UpdateScheduler
from lv_controls.core.timers import ManualTimerService
from lv_controls.producers import (
    DropDownFilterProducer,
    DropDownSortProducer,
    FilterOption,
    SearchProducer,
    SortOption,
)
from lv_controls.validation.errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 15

T = TypeVar("T")


class ConnectivitySwitch:
    """Stand-in for the platform's "is offline" capability check."""

    def __init__(self, offline: bool = False) -> None:
        self.offline = offline

    def __call__(self) -> bool:
        return self.offline


class TimerPump:
    """Advances a ManualTimerService to the current wall-clock time."""

    def __init__(self, timers: ManualTimerService) -> None:
        self.timers = timers
        self._origin = time.monotonic() - timers.now

    def pump(self) -> int:
        return self.timers.advance_to(time.monotonic() - self._origin)


@dataclass
class ListSession:
    """One configured list view with the producers attached to it."""
    name: str
    list_view: DataFrameListView
    scheduler: Optional[UpdateScheduler] = None
    search: Optional[SearchProducer] = None
    filter: Optional[DropDownFilterProducer] = None
    sort: Optional[DropDownSortProducer] = None
    alerts: List[str] = field(default_factory=list)

    @property
    def connected(self) -> bool:
        return self.scheduler is not None


def _filter_options(cfg: ListViewConfig) -> List[FilterOption]:
    options: List[FilterOption] = []
    for raw in cfg.filters:
        offline_raw: Optional[Dict[str, Any]] = raw.get("offline")
        offline = None
        if offline_raw:
            offline = OfflineConstraint(
                attribute=offline_raw["attribute"],
                operator=offline_raw.get("operator", "equals"),
                path=cfg.entity or "",
                value=offline_raw.get("value", ""),
            )
        options.append(
            FilterOption(
                caption=raw.get("caption", ""),
                constraint=raw.get("constraint", ""),
                offline_constraint=offline,
                is_default=bool(raw.get("default", False)),
            )
        )
    return options


def _sort_options(cfg: ListViewConfig) -> List[SortOption]:
    return [
        SortOption(
            caption=raw.get("caption", raw.get("attribute", "")),
            attribute=raw.get("attribute", ""),
            direction=raw.get("direction", "asc"),
            is_default=bool(raw.get("default", False)),
        )
        for raw in cfg.sort_options
    ]


def _build_producer(session: ListSession, cfg: ListViewConfig, kind: str, factory: Callable[[], T]) -> Optional[T]:
    try:
        return factory()
    except ValidationError as e:
        logger.error(
            "Invalid producer configuration",
            extra={"list": cfg.name, "producer": kind, "issues": e.messages},
        )
        session.alerts.extend(e.messages)
        return None


def _attach_producers(
    session: ListSession,
    scheduler: UpdateScheduler,
    cfg: ListViewConfig,
    connectivity: ConnectivitySwitch,
) -> None:
    # Each producer is validated on its own; a broken one leaves the others working
    if cfg.search_attributes:
        session.search = _build_producer(
            session,
            cfg,
            "search",
            lambda: SearchProducer(
                scheduler,
                producer_id=f"{cfg.name}:search",
                entity=cfg.entity or "",
                attributes=cfg.search_attributes,
                enum_captions=cfg.raw.get("enum_captions"),
                is_offline=connectivity,
            ),
        )
    if cfg.filters:
        session.filter = _build_producer(
            session,
            cfg,
            "filter",
            lambda: DropDownFilterProducer(
                scheduler,
                producer_id=f"{cfg.name}:filter",
                options=_filter_options(cfg),
                group=cfg.raw.get("filter_group", ""),
                is_offline=connectivity,
            ),
        )
    if cfg.sort_options:
        session.sort = _build_producer(
            session,
            cfg,
            "sort",
            lambda: DropDownSortProducer(
                scheduler,
                producer_id=f"{cfg.name}:sort",
                options=_sort_options(cfg),
            ),
        )

    if session.filter is not None:
        session.filter.select_default()
    if session.sort is not None:
        session.sort.select_default()
    # First load, even when no producer has a default
    scheduler.register_mutation()


def build_list_session(
    cfg: ListViewConfig,
    data: pd.DataFrame,
    page_root: DomNode,
    registry: SchedulerRegistry,
    connectivity: ConnectivitySwitch,
) -> ListSession:
    """
    Place a list view and its controls in the page tree and connect the
    controls to the list view's scheduler.
    """
    container = page_root.append(DomNode("section"))
    list_view = DataFrameListView(
        data,
        entity=cfg.entity,
        timers=registry.timers,
        query_source=dataframe_query_source(data),
        page_size=cfg.page_size or DEFAULT_PAGE_SIZE,
        name=cfg.name,
    )
    container.append(list_view.dom_node)
    controls = container.append(DomNode("div", {"list-controls"}))

    session = ListSession(name=cfg.name, list_view=list_view)

    def _on_connected(scheduler: UpdateScheduler) -> None:
        session.scheduler = scheduler
        _attach_producers(session, scheduler, cfg, connectivity)

    def _on_error(message: str) -> None:
        session.alerts.append(message)

    registry.connect_when_available(controls, cfg.raw.get("producer_entity", cfg.entity), _on_connected, _on_error)
    return session


def reapply_producers(session: ListSession) -> None:
    """
    Rebuild every producer's fragment, e.g. after the connectivity mode
    changed and the stored fragments are in the wrong surface.
    """
    if not session.connected:
        return
    if session.search is not None:
        session.search.apply_search(session.search.search_text)
    if session.filter is not None:
        session.filter.select(session.filter.selected_index)
    session.scheduler.register_mutation()
