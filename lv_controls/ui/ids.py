from __future__ import annotations

__all__ = ["IDs"]


class IDs:
    class Store:
        ACTIVE_LIST = "active-list"

    class Control:
        LIST_SELECT = "list-select"
        SEARCH_INPUT = "search-input"
        FILTER_SELECT = "filter-select"
        SORT_SELECT = "sort-select"
        OFFLINE_SWITCH = "offline-switch"

        # Controls containers (hidden when a list has no such producer)
        FILTER_CONTAINER = "filter-container"
        SORT_CONTAINER = "sort-container"
        CONTROLS_ALERT = "controls-alert"

        # List view
        LIST_TABLE = "list-table"
        LIST_WRAPPER = "list-wrapper"
        QUERY_TEXT = "query-text"

        # Pumps the timer service
        TIMER_INTERVAL = "timer-interval"

        # Status bar
        STATUS_BAR = "status-bar"
