from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from lv_controls.core.constraints import SortSpec
from lv_controls.core.scheduler import UpdateScheduler
from lv_controls.validation.producer_validation import validate_sort_options


@dataclass(frozen=True)
class SortOption:
    caption: str
    attribute: str
    direction: str = "asc"
    is_default: bool = False

    @property
    def sort_spec(self) -> SortSpec:
        return (self.attribute, self.direction)


class DropDownSortProducer:
    """Drop-down of sort orders; each selection replaces this producer's sort entry."""

    def __init__(self, scheduler: UpdateScheduler, producer_id: str, options: Sequence[SortOption]) -> None:
        validate_sort_options(options)
        self.scheduler = scheduler
        self.producer_id = producer_id
        self.options = list(options)
        self.selected_index: Optional[int] = None

    def select(self, index: int) -> SortSpec:
        if not 0 <= index < len(self.options):
            raise IndexError(f"Sort option {index} out of range")
        spec = self.options[index].sort_spec
        self.selected_index = index
        self.scheduler.set_sorting(self.producer_id, spec)
        return spec

    def select_default(self) -> Optional[SortSpec]:
        for i, option in enumerate(self.options):
            if option.is_default:
                return self.select(i)
        return None
