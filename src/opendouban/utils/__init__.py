"""Utility modules for opendouban."""

from opendouban.utils.config import read_config, resolve_setting, set_config_value
from opendouban.utils.debug import debug, error, info, warn

__all__ = [
    "read_config",
    "resolve_setting",
    "set_config_value",
    "debug",
    "info",
    "warn",
    "error",
]
