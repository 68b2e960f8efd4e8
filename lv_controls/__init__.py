"""
Top-level package for list view controls.

Producers (search boxes, filter drop-downs, sort controls) feed filter and
sort fragments into a per-list-view UpdateScheduler, which debounces them and
refreshes the list view one update at a time.

Most code should import from submodules such as:
    lv_controls.core
    lv_controls.producers
    lv_controls.ui
"""

__all__: list[str] = []
