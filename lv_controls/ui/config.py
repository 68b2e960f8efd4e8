from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from lv_controls.config.model import GlobalConfig
from lv_controls.core.registry import SchedulerRegistry
from lv_controls.core.timers import ManualTimerService
from lv_controls.ui.list_session import ConnectivitySwitch, ListSession


@dataclass
class AppConfig:
    """
    Shared state for the Dash app, passed into layout + callback registration
    instead of module-level globals.

    All scheduler activity (producer writes and timer pumping) must happen
    while holding `lock`, which keeps every scheduler on one logical thread.
    """
    config_root: Path
    global_config: GlobalConfig
    timers: ManualTimerService
    registry: SchedulerRegistry
    connectivity: ConnectivitySwitch
    sessions: Dict[str, ListSession] = field(default_factory=dict)
    default_list: Optional[str] = None
    lock: threading.Lock = field(default_factory=threading.Lock)

    @property
    def list_names(self) -> List[str]:
        return list(self.sessions)

    def session(self, name: Optional[str]) -> Optional[ListSession]:
        if name is None:
            return None
        return self.sessions.get(name)

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if not self.sessions:
            raise RuntimeError("AppConfig.sessions must contain at least one list view.")
        if self.default_list is not None and self.default_list not in self.sessions:
            raise RuntimeError(f"Default list '{self.default_list}' is not configured.")
