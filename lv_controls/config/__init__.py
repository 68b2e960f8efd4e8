"""
Config package for lv_controls.

Responsible for:
- config models (GlobalConfig, ListViewConfig, HelperSettings)
- config I/O helpers (load_global_config / load_list_registry / load_list_data)
"""

from .model import GlobalConfig, HelperSettings, ListViewConfig
from .config_loader import load_global_config, load_list_data, load_list_registry

__all__ = [
    "GlobalConfig",
    "HelperSettings",
    "ListViewConfig",
    "load_global_config",
    "load_list_data",
    "load_list_registry",
]
