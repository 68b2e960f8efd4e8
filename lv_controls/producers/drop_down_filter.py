from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from lv_controls.core.constraints import NONE_GROUP, ConstraintFragment, OfflineFragment
from lv_controls.core.scheduler import UpdateScheduler
from lv_controls.validation.producer_validation import validate_filter_options

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterOption:
    """
    One entry of a filter drop-down.

    - caption: label shown to the user
    - constraint: bracketed online predicate; empty means "no filter"
    - offline_constraint: structured equivalent used when offline
    - is_default: selected when the producer connects
    """
    caption: str
    constraint: str = ""
    offline_constraint: Optional[OfflineFragment] = None
    is_default: bool = False

    def fragment(self, offline: bool) -> ConstraintFragment:
        if offline:
            return self.offline_constraint if self.offline_constraint is not None else ""
        return self.constraint


class DropDownFilterProducer:
    """
    Drop-down of predefined filters. Producers sharing a `group` are OR-ed
    together; without a group the selection is AND-ed with everything else.
    """

    def __init__(
        self,
        scheduler: UpdateScheduler,
        producer_id: str,
        options: Sequence[FilterOption],
        group: str = NONE_GROUP,
        is_offline: Optional[Callable[[], bool]] = None,
    ) -> None:
        validate_filter_options(options)
        self.scheduler = scheduler
        self.producer_id = producer_id
        self.options = list(options)
        self.group = group
        self._is_offline = is_offline or (lambda: False)
        self.selected_index: Optional[int] = None

    @property
    def selected(self) -> Optional[FilterOption]:
        if self.selected_index is None:
            return None
        return self.options[self.selected_index]

    def select(self, index: Optional[int]) -> ConstraintFragment:
        """Select option `index`; None clears this producer's filter."""
        if index is None:
            fragment: ConstraintFragment = ""
        else:
            if not 0 <= index < len(self.options):
                raise IndexError(f"Filter option {index} out of range")
            fragment = self.options[index].fragment(bool(self._is_offline()))

        self.selected_index = index
        self.scheduler.set_constraint(self.producer_id, fragment, self.group)
        return fragment

    def select_default(self) -> Optional[ConstraintFragment]:
        for i, option in enumerate(self.options):
            if option.is_default:
                return self.select(i)
        return None
