"""Config utility for persistent OpenDouban settings.

Reads and writes ~/.config/opendouban/config.toml (or the XDG equivalent) using
tomli/tomli-w, and resolves individual keys with the precedence
CLI > env > config file > default.
"""

from pathlib import Path
from typing import TypeVar, Any, cast
import os
import contextlib

import tomli
import tomli_w

# Determine config directory respecting XDG_CONFIG_HOME if set.
_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
# Path like ~/.config/opendouban or $XDG_CONFIG_HOME/opendouban
CONFIG_DIR = _xdg_config_home / "opendouban"
CONFIG_FILE = CONFIG_DIR / "config.toml"

ENV_PREFIX = "OPENDOUBAN_"

T = TypeVar("T")


def read_config() -> dict[str, Any]:
    """Read the TOML config file if it exists, returning a (nested) dict."""

    if not CONFIG_FILE.exists():
        return {}
    with CONFIG_FILE.open("rb") as f:
        return tomli.load(f)


def set_config_value(dotted_key: str, value: Any) -> None:
    """Persist *value* under *dotted_key* in config.toml.

    Args:
        dotted_key: Key path such as ``"poster_size"`` or ``"cache.bypass"``.
        value: Any TOML-serializable value.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    data = read_config()
    *parents, leaf = dotted_key.split(".")
    table = data
    for part in parents:
        table = table.setdefault(part, {})
    table[leaf] = value
    with CONFIG_FILE.open("wb") as f:
        tomli_w.dump(data, f)


def _lookup_nested(data: dict[str, Any], dotted_key: str) -> Any | None:
    """Retrieve a nested value from *data* given a dotted key path.

    Example: dotted_key="cache.bypass" will attempt
    ``data["cache"]["bypass"]`` returning None if any level is missing.
    """

    keys = dotted_key.split(".")
    current: Any = data
    for part in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def _make_env_var_name(dotted_key: str, prefix: str = ENV_PREFIX) -> str:
    """Convert a dotted key path to an uppercase ENV var name.

    Example: "cache.bypass" -> "OPENDOUBAN_CACHE_BYPASS".
    """

    return prefix + dotted_key.replace(".", "_").upper()


def _coerce(raw: Any, default: T) -> T:
    """Coerce an env or config value to the type of *default* when possible."""
    if isinstance(default, bool):
        if isinstance(raw, bool):
            return cast(T, raw)
        if isinstance(raw, str):
            return cast(T, raw.lower() in {"1", "true", "yes", "on"})
        return default
    if isinstance(default, int):
        if isinstance(raw, int):
            return cast(T, raw)
        with contextlib.suppress(ValueError):
            return cast(T, int(raw))
        return default
    if isinstance(default, float):
        if isinstance(raw, (int, float)):
            return cast(T, float(raw))
        with contextlib.suppress(ValueError):
            return cast(T, float(raw))
        return default
    return cast(T, raw)


def resolve_setting(
    key: str,
    *,
    default: T,
    cli_value: T | None = None,
) -> T:
    """Resolve a configuration *key* using precedence CLI > env > config > default.

    Args:
        key: Dotted key path, e.g. ``"cache.bypass"`` or ``"poster_size"``.
        default: Value to fall back to when no overrides found.
        cli_value: Value passed from CLI option (may be ``None`` when not provided).

    Returns:
        The resolved value with type matching *default* (or *cli_value*).
    """

    # 1. CLI value wins if provided (and not ``None`` to mimic Typer semantics).
    if cli_value is not None:
        return cli_value

    # 2. Environment variable
    env_var = _make_env_var_name(key)
    if env_var in os.environ:
        return _coerce(os.environ[env_var], default)

    # 3. Config file lookup
    file_val = _lookup_nested(read_config(), key)
    if file_val is not None:
        return _coerce(file_val, default)

    # 4. Default
    return default
