from __future__ import annotations

from typing import Dict, Mapping

from .constraints import NONE_GROUP, ConstraintFragment, SortSpec


def normalise_group(group: str | None) -> str:
    group = (group or "").strip()
    return group or NONE_GROUP


class ConstraintStore:
    """
    In-memory table of filter fragments and sort specs, keyed by producer.

    Layout:
    - constraints: group -> {producer_id -> fragment}; the NONE_GROUP group always exists
    - sorting: producer_id -> (attribute, direction)

    Dict insertion order is the composition order for both groups and producers.
    Overwriting a producer's fragment keeps its first insertion position.

    :param exclusive_sorting: if True, set_sorting drops every other producer's
        sort entry (only the latest caller survives). Otherwise each producer
        keeps its own latest entry.
    """

    def __init__(self, exclusive_sorting: bool = False) -> None:
        self.exclusive_sorting = exclusive_sorting
        self._constraints: Dict[str, Dict[str, ConstraintFragment]] = {NONE_GROUP: {}}
        self._sorting: Dict[str, SortSpec] = {}

    def set_constraint(
        self,
        producer_id: str,
        fragment: ConstraintFragment,
        group: str = NONE_GROUP,
    ) -> None:
        self._constraints.setdefault(normalise_group(group), {})[producer_id] = fragment

    def set_sorting(self, producer_id: str, sort_spec: SortSpec) -> None:
        if self.exclusive_sorting:
            self._sorting = {}
        self._sorting[producer_id] = tuple(sort_spec)

    # ------------------------------------------------------------------
    # Read-only snapshots
    # ------------------------------------------------------------------
    @property
    def constraints(self) -> Mapping[str, Mapping[str, ConstraintFragment]]:
        return {group: dict(fragments) for group, fragments in self._constraints.items()}

    @property
    def sorting(self) -> Mapping[str, SortSpec]:
        return dict(self._sorting)
