"""
Producers: widgets that contribute filter and sort fragments to a list view's
UpdateScheduler under their own producer id.
"""

from .drop_down_filter import DropDownFilterProducer, FilterOption
from .drop_down_sort import DropDownSortProducer, SortOption
from .search import SearchProducer

__all__ = [
    "DropDownFilterProducer",
    "DropDownSortProducer",
    "FilterOption",
    "SearchProducer",
    "SortOption",
]
