"""
Core layer: constraint store, composition, the update scheduler, list view
adapters and the scheduler registry
"""

from .composer import UpdateRequest, compose
from .constraint_store import ConstraintStore
from .constraints import NONE_GROUP, GroupedOfflineConstraint, OfflineConstraint
from .exceptions import CompatibilityError
from .list_view import DataFrameListView, ListView
from .registry import SchedulerRegistry
from .scheduler import SchedulerState, UpdateScheduler
from .timers import AsyncioTimerService, ManualTimerService

__all__ = [
    "AsyncioTimerService",
    "CompatibilityError",
    "ConstraintStore",
    "DataFrameListView",
    "GroupedOfflineConstraint",
    "ListView",
    "ManualTimerService",
    "NONE_GROUP",
    "OfflineConstraint",
    "SchedulerRegistry",
    "SchedulerState",
    "UpdateRequest",
    "UpdateScheduler",
    "compose",
]
