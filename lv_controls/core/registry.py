from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING, Callable, Optional

from .constraint_store import ConstraintStore
from .dom import LIST_VIEW_CLASS, DomNode
from .exceptions import CompatibilityError
from .list_view import ListView
from .scheduler import DEFAULT_DELAY, UpdateScheduler
from .timers import TimerService

if TYPE_CHECKING:
    from lv_controls.config.model import HelperSettings

logger = logging.getLogger(__name__)

MAX_ASCENT = 5

NO_LIST_VIEW_MESSAGE = "Unable to find a list view on the page"
INCOMPATIBLE_LIST_VIEW_MESSAGE = (
    "This list view is not compatible: it does not expose a data source that accepts constraints"
)
ENTITY_MISMATCH_MESSAGE = 'Supplied entity "{entity}" does not belong to list view data source'


def find_target_list_view(
    widget_node: Optional[DomNode],
    entity: Optional[str] = None,
    max_ascent: int = MAX_ASCENT,
) -> Optional[ListView]:
    """
    Walk up from `widget_node` (at most `max_ascent` levels) until an ancestor
    contains a list view.

    Within that ancestor a list view of `entity` is preferred; otherwise the
    first one in document order is returned so the caller can report the
    entity mismatch.
    """
    node = widget_node
    for _ in range(max_ascent + 1):
        if node is None:
            return None
        candidates = [n.widget for n in node.query_all(LIST_VIEW_CLASS) if n.widget is not None]
        if candidates:
            if entity:
                for candidate in candidates:
                    if getattr(candidate, "entity", None) == entity:
                        return candidate
            return candidates[0]
        node = node.parent
    return None


def validate_compatibility(target: Optional[ListView], entity: Optional[str] = None) -> str:
    """Return the compatibility error message, or "" if `target` can be driven."""
    if target is None:
        return NO_LIST_VIEW_MESSAGE

    datasource = getattr(target, "datasource", None)
    if (
        datasource is None
        or not hasattr(datasource, "constraints")
        or not hasattr(datasource, "sorting")
        or not callable(getattr(target, "update", None))
        or getattr(target, "dom_node", None) is None
    ):
        return INCOMPATIBLE_LIST_VIEW_MESSAGE

    if entity and getattr(target, "entity", None) != entity:
        return ENTITY_MISMATCH_MESSAGE.format(entity=entity)

    return ""


class SchedulerRegistry:
    """
    Binds exactly one UpdateScheduler to each list view.

    Schedulers are cached per list view identity and are released together
    with the list view.
    """

    def __init__(
        self,
        timers: TimerService,
        is_offline: Optional[Callable[[], bool]] = None,
        delay: float = DEFAULT_DELAY,
        max_ascent: int = MAX_ASCENT,
        exclusive_sorting: bool = False,
        offline_or_groups: bool = True,
        connect_retries: int = 25,
        connect_interval: float = 0.02,
    ) -> None:
        self.timers = timers
        self.is_offline = is_offline
        self.delay = delay
        self.max_ascent = max_ascent
        self.exclusive_sorting = exclusive_sorting
        self.offline_or_groups = offline_or_groups
        self.connect_retries = connect_retries
        self.connect_interval = connect_interval
        self._schedulers: "weakref.WeakKeyDictionary[ListView, UpdateScheduler]" = weakref.WeakKeyDictionary()

    @classmethod
    def from_settings(
        cls,
        settings: HelperSettings,
        timers: TimerService,
        is_offline: Optional[Callable[[], bool]] = None,
    ) -> SchedulerRegistry:
        return cls(
            timers=timers,
            is_offline=is_offline,
            delay=settings.debounce_ms / 1000.0,
            max_ascent=settings.max_ascent,
            exclusive_sorting=settings.exclusive_sorting,
            offline_or_groups=settings.offline_or_groups,
            connect_retries=settings.connect_retries,
            connect_interval=settings.connect_interval_ms / 1000.0,
        )

    def __len__(self) -> int:
        return len(self._schedulers)

    def get(self, list_view: ListView) -> Optional[UpdateScheduler]:
        return self._schedulers.get(list_view)

    def get_or_create(self, target_root: Optional[DomNode], entity: Optional[str] = None) -> UpdateScheduler:
        """
        Locate the list view near `target_root` and return its scheduler,
        creating it on first use.

        Raises:
            CompatibilityError: no list view within reach, an incompatible
                list view, or one bound to another entity
        """
        target = find_target_list_view(target_root, entity, self.max_ascent)
        message = validate_compatibility(target, entity)
        if message:
            logger.warning("List view compatibility check failed", extra={"entity": entity, "reason": message})
            raise CompatibilityError(message)

        scheduler = self._schedulers.get(target)
        if scheduler is None:
            scheduler = UpdateScheduler(
                target,
                self.timers,
                is_offline=self.is_offline,
                delay=self.delay,
                store=ConstraintStore(exclusive_sorting=self.exclusive_sorting),
                offline_or_groups=self.offline_or_groups,
            )
            self._schedulers[target] = scheduler

        scheduler.attach()
        return scheduler

    def connect_when_available(
        self,
        widget_node: Optional[DomNode],
        entity: Optional[str],
        on_connected: Callable[[UpdateScheduler], None],
        on_error: Callable[[str], None],
    ) -> None:
        """
        Poll for a list view next to `widget_node` and connect once it shows up.

        After `connect_retries` unsuccessful polls the connection is attempted
        anyway, which reports the compatibility error through `on_error`.
        """
        attempts = 0

        def _connect() -> None:
            try:
                scheduler = self.get_or_create(widget_node, entity)
            except CompatibilityError as e:
                on_error(str(e))
                return
            on_connected(scheduler)

        def _poll() -> None:
            nonlocal attempts
            attempts += 1
            if attempts > self.connect_retries or find_target_list_view(widget_node, entity, self.max_ascent):
                _connect()
            else:
                self.timers.call_later(self.connect_interval, _poll)

        _poll()
