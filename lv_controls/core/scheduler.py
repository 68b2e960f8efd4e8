from __future__ import annotations

import logging
import weakref
from enum import Enum
from typing import Callable, Optional

from .composer import UpdateRequest, compose
from .constraint_store import ConstraintStore
from .constraints import NONE_GROUP, ConstraintFragment, SortSpec
from .dom import INITIAL_LOADING_CLASS, LOADING_CLASS
from .list_view import ListView
from .timers import TimerHandle, TimerService

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 0.05


class SchedulerState(Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    RUNNING = "running"
    RUNNING_WITH_PENDING_RERUN = "running_with_pending_rerun"


def _always_online() -> bool:
    return False


class UpdateScheduler:
    """
    Coalesces filter/sort contributions from many producers into refreshes of
    a single list view.

    Guarantees:
    - debounce: a burst of mutations restarts the timer, so only the quiet
      period after the last one triggers a refresh
    - single-flight: at most one list view update is in flight
    - no lost update: mutations arriving while an update runs cause exactly
      one further update after it completes, composed from the store as it
      stands at that moment

    A list view that never invokes its completion callback leaves the
    scheduler in RUNNING forever; there is no timeout.

    :param list_view: target list view
    :param timers: TimerService used for the debounce timer
    :param is_offline: capability check choosing the offline composition
    :param delay: debounce delay in seconds
    :param store: ConstraintStore (a fresh one is created if omitted)
    :param offline_or_groups: see compose_offline()
    """

    def __init__(
        self,
        list_view: ListView,
        timers: TimerService,
        is_offline: Optional[Callable[[], bool]] = None,
        delay: float = DEFAULT_DELAY,
        store: Optional[ConstraintStore] = None,
        offline_or_groups: bool = True,
    ) -> None:
        self._target = weakref.ref(list_view)
        self._timers = timers
        self._is_offline = is_offline or _always_online
        self.delay = delay
        self.store = store if store is not None else ConstraintStore()
        self.offline_or_groups = offline_or_groups

        self.state = SchedulerState.IDLE
        self.first_run_completed = False
        self.last_request: Optional[UpdateRequest] = None
        self._timer: Optional[TimerHandle] = None

    @property
    def _list_view(self) -> ListView:
        target = self._target()
        if target is None:
            raise ReferenceError("The list view of this scheduler no longer exists")
        return target

    # ------------------------------------------------------------------
    # Producer-facing API
    # ------------------------------------------------------------------
    def set_constraint(
        self,
        producer_id: str,
        fragment: ConstraintFragment,
        group: str = NONE_GROUP,
    ) -> None:
        self.store.set_constraint(producer_id, fragment, group)
        self.register_mutation()

    def set_sorting(self, producer_id: str, sort_spec: SortSpec) -> None:
        self.store.set_sorting(producer_id, sort_spec)
        self.register_mutation()

    def get_target(self) -> ListView:
        return self._list_view

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------
    @property
    def is_busy(self) -> bool:
        return self.state is not SchedulerState.IDLE

    def register_mutation(self) -> None:
        if self.state in (SchedulerState.RUNNING, SchedulerState.RUNNING_WITH_PENDING_RERUN):
            # Picked up by the next composition, not debounced again
            self._transition(SchedulerState.RUNNING_WITH_PENDING_RERUN)
            return

        if self._timer is not None:
            self._timer.cancel()
        self._timer = self._timers.call_later(self.delay, self._on_timer)
        self._transition(SchedulerState.DEBOUNCING)

    def attach(self) -> None:
        """Reset the initial-loading phase, as when a producer (re)connects."""
        self.first_run_completed = False
        self._list_view.dom_node.add_class(INITIAL_LOADING_CLASS)
        logger.info(
            "Scheduler attached",
            extra={"list_view": repr(self._list_view), "state": self.state.value},
        )

    def _on_timer(self) -> None:
        self._timer = None
        self._transition(SchedulerState.RUNNING)
        self._issue_refresh()

    def _issue_refresh(self) -> None:
        request = compose(
            self.store,
            offline=bool(self._is_offline()),
            or_groups=self.offline_or_groups,
        )
        self.last_request = request

        if self.first_run_completed:
            self._list_view.dom_node.add_class(LOADING_CLASS)

        logger.debug(
            "Issuing list view update",
            extra={
                "offline": request.offline,
                "constraints": str(request.constraints),
                "sorting": [list(pair) for pair in request.sorting],
            },
        )
        self._list_view.update(request, self._on_refresh_complete)

    def _on_refresh_complete(self) -> None:
        if self.state not in (SchedulerState.RUNNING, SchedulerState.RUNNING_WITH_PENDING_RERUN):
            logger.warning("Ignoring completion callback outside a running update", extra={"state": self.state.value})
            return

        dom_node = self._list_view.dom_node
        dom_node.remove_class(LOADING_CLASS)
        dom_node.remove_class(INITIAL_LOADING_CLASS)
        self.first_run_completed = True

        if self.state is SchedulerState.RUNNING_WITH_PENDING_RERUN:
            self._transition(SchedulerState.RUNNING)
            self._issue_refresh()
        else:
            self._transition(SchedulerState.IDLE)

    def _transition(self, new_state: SchedulerState) -> None:
        if new_state is not self.state:
            logger.debug("Scheduler state change", extra={"from": self.state.value, "to": new_state.value})
        self.state = new_state
