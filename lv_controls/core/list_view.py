from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

import numpy as np
import pandas as pd

from .composer import UpdateRequest
from .constraints import GroupedOfflineConstraint, OfflineConstraint, OfflineFragment, SortSpec
from .dom import LIST_VIEW_CLASS, DomNode
from .timers import TimerService

logger = logging.getLogger(__name__)

QuerySource = Callable[[str, Sequence[SortSpec]], pd.DataFrame]


@dataclass
class DataSourceSlots:
    """The filter/sort slots of a list view, written only by its scheduler."""
    constraints: Union[str, Tuple[OfflineFragment, ...]] = ""
    sorting: Tuple[SortSpec, ...] = field(default_factory=tuple)


@runtime_checkable
class ListView(Protocol):
    """
    Contract of a refreshable list view.

    update() performs the refresh asynchronously and must invoke `callback`
    exactly once when done.
    """
    entity: Optional[str]
    dom_node: DomNode
    datasource: DataSourceSlots

    def update(self, request: Optional[UpdateRequest], callback: Callable[[], None]) -> None: ...

    @property
    def row_count(self) -> int: ...


# ---------------------------------------------------------------------------
# Offline constraint evaluation
# ---------------------------------------------------------------------------
def compare_series(series: pd.Series, operator: str, value: object) -> pd.Series:
    if operator == "contains":
        return series.astype(str).str.contains(str(value), case=False, regex=False, na=False)

    if operator in ("greaterThan", "greaterThanOrEquals", "lessThan", "lessThanOrEquals"):
        numeric = pd.to_numeric(series, errors="coerce")
        target = pd.to_numeric(pd.Series([value]), errors="coerce").iloc[0]
        if pd.isna(target):
            return pd.Series(False, index=series.index)
        if operator == "greaterThan":
            return numeric > target
        if operator == "greaterThanOrEquals":
            return numeric >= target
        if operator == "lessThan":
            return numeric < target
        return numeric <= target

    if operator == "equals":
        return series.astype(str) == str(value)
    if operator == "notEquals":
        return series.astype(str) != str(value)

    logger.warning("Unsupported offline operator", extra={"operator": operator})
    return pd.Series(False, index=series.index)


def offline_mask(df: pd.DataFrame, fragment: OfflineFragment) -> pd.Series:
    """Boolean row mask for one offline fragment."""
    if isinstance(fragment, GroupedOfflineConstraint):
        members = [offline_mask(df, c) for c in fragment.constraints if c]
        if not members:
            return pd.Series(True, index=df.index)
        reduce = np.logical_or if fragment.operator == "or" else np.logical_and
        return pd.Series(reduce.reduce([m.to_numpy() for m in members]), index=df.index)

    if fragment.attribute not in df.columns:
        logger.warning(
            "Offline constraint on unknown attribute",
            extra={"attribute": fragment.attribute, "path": fragment.path},
        )
        return pd.Series(False, index=df.index)

    return compare_series(df[fragment.attribute], fragment.operator, fragment.value)


def apply_offline_constraints(df: pd.DataFrame, constraints: Sequence[OfflineFragment]) -> pd.DataFrame:
    mask = pd.Series(True, index=df.index)
    for fragment in constraints:
        mask &= offline_mask(df, fragment)
    return df[mask]


def apply_sorting(df: pd.DataFrame, sorting: Sequence[SortSpec]) -> pd.DataFrame:
    pairs = [(attr, direction) for attr, direction in sorting if attr in df.columns]
    if not pairs:
        return df
    return df.sort_values(
        by=[attr for attr, _ in pairs],
        ascending=[direction.lower() != "desc" for _, direction in pairs],
        kind="mergesort",
    )


class DataFrameListView:
    """
    List view over an in-memory pandas DataFrame.

    - Offline requests are filtered locally.
    - Online (textual) requests are passed to `query_source` when one is given,
      otherwise the rows are left unfiltered.
    - Completion is reported through the timer service, never synchronously.
    """

    def __init__(
        self,
        data: pd.DataFrame,
        entity: Optional[str],
        timers: TimerService,
        query_source: Optional[QuerySource] = None,
        page_size: Optional[int] = None,
        name: str = "list-view",
    ) -> None:
        self.data = data
        self.entity = entity
        self.timers = timers
        self.query_source = query_source
        self.page_size = page_size
        self.name = name

        self.datasource = DataSourceSlots()
        self.dom_node = DomNode("div", {LIST_VIEW_CLASS})
        self.dom_node.widget = self

        self.rows: pd.DataFrame = data
        self.update_count = 0

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def page_count(self) -> int:
        if not self.page_size:
            return 1
        return max(1, -(-len(self.rows) // self.page_size))

    def visible_rows(self, page: int = 1) -> pd.DataFrame:
        if not self.page_size:
            return self.rows
        page = min(max(1, page), self.page_count)
        start = (page - 1) * self.page_size
        return self.rows.iloc[start:start + self.page_size]

    def update(self, request: Optional[UpdateRequest], callback: Callable[[], None]) -> None:
        if request is not None:
            self.datasource.constraints = request.constraints
            self.datasource.sorting = tuple(request.sorting)
        self.update_count += 1

        def _complete() -> None:
            try:
                self.rows = self._compute_rows()
            except Exception:
                logger.exception("List view refresh failed", extra={"list_view": self.name})
            finally:
                callback()

        self.timers.call_later(0.0, _complete)

    def _compute_rows(self) -> pd.DataFrame:
        constraints = self.datasource.constraints
        sorting = self.datasource.sorting

        if isinstance(constraints, str):
            if self.query_source is not None:
                return self.query_source(constraints, sorting)
            rows = self.data
        else:
            rows = apply_offline_constraints(self.data, constraints)

        rows = apply_sorting(rows, sorting)
        logger.debug(
            "List view rows recomputed",
            extra={"list_view": self.name, "rows": len(rows), "update": self.update_count},
        )
        return rows

    def __repr__(self) -> str:
        return f"DataFrameListView(name={self.name!r}, entity={self.entity!r})"
