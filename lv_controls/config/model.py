from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

from lv_controls.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


def _check_type(name: str, value: Any, type_name: str) -> None:
    # bool is an int subclass, so flags and numbers are told apart explicitly
    if type_name == "bool":
        ok = isinstance(value, bool)
    else:
        ok = isinstance(value, int) and not isinstance(value, bool)
    if not ok:
        raise ConfigError(f"helper.{name} must be {type_name}, got {value!r}")


@dataclass(frozen=True)
class HelperSettings:
    """
    Tuning knobs for the update scheduler and the list view lookup.

    Fields:

    - debounce_ms: quiet period before a burst of mutations triggers a refresh
    - max_ascent: how many ancestor levels are searched for a list view
    - connect_retries: polls before giving up on a list view that has not rendered yet
    - connect_interval_ms: delay between those polls
    - exclusive_sorting: if True, a sort producer replaces every other producer's sort
    - offline_or_groups: if True, offline composition keeps OR semantics of named groups
    """
    debounce_ms: int = 50
    max_ascent: int = 5
    connect_retries: int = 25
    connect_interval_ms: int = 20
    exclusive_sorting: bool = False
    offline_or_groups: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> HelperSettings:
        data = data or {}
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        kwargs = {k: v for k, v in data.items() if k in known}
        for f in fields(cls):
            if f.name in kwargs:
                _check_type(f.name, kwargs[f.name], f.type)
        settings = cls(**kwargs)

        if settings.debounce_ms < 0 or settings.connect_interval_ms < 0:
            raise ConfigError("helper delays must not be negative")
        if settings.max_ascent < 1:
            raise ConfigError("helper.max_ascent must be at least 1")
        if settings.connect_retries < 0:
            raise ConfigError("helper.connect_retries must not be negative")
        if unknown:
            logger.warning("Ignoring unknown helper settings", extra={"keys": unknown})
        return settings


@dataclass
class ListViewConfig:
    """
    Parsed config entry for a single list view.
    """
    raw: Dict[str, Any]
    source_path: Path
    index: int

    @property
    def name(self) -> str:
        return self.raw.get("name", f"List {self.index}")

    @property
    def entity(self) -> Optional[str]:
        return self.raw.get("entity")

    @property
    def file(self) -> Path:
        return Path(self.raw["file"])

    @property
    def columns(self) -> Optional[List[str]]:
        cols = self.raw.get("columns")
        return list(cols) if cols else None

    @property
    def page_size(self) -> Optional[int]:
        return self.raw.get("page_size")

    @property
    def search_attributes(self) -> List[str]:
        return list(self.raw.get("search_attributes", []))

    @property
    def filters(self) -> List[Dict[str, Any]]:
        return list(self.raw.get("filters", []))

    @property
    def sort_options(self) -> List[Dict[str, Any]]:
        return list(self.raw.get("sort_options", []))

    @classmethod
    def from_raw(cls, raw: Dict[str, Any], source_path: Path, index: int) -> ListViewConfig:
        if "file" not in raw:
            raise ConfigError(f"List view config {source_path.name} has no 'file' entry")
        return cls(raw=raw, source_path=source_path, index=index)


@dataclass
class GlobalConfig:
    ui_title: str = "List View Controls"
    default_list: Optional[str] = None
    data_root: Optional[Path] = None
    helper: HelperSettings = field(default_factory=HelperSettings)
    lists: List[ListViewConfig] = field(default_factory=list)

    def resolve_file(self, cfg: ListViewConfig, config_root: Path) -> Path:
        path = cfg.file
        if path.is_absolute():
            return path
        return (self.data_root or config_root) / path
