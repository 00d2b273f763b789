"""Persistent spinerestore settings.

Settings live in ~/.config/spinerestore/config.toml (respecting
XDG_CONFIG_HOME). Uses tomli/tomli-w for TOML parsing and writing.

Known keys:
- ``workers``: size of the worker pool; 0 means one worker per CPU.
- ``paths.work_dir``: default work directory for the CLI.
- ``layout.atlas_dir`` / ``layout.skel_dir``: names of the sibling directories
  that organized .atlas and .skel files are moved into.
"""

import contextlib
import os
from pathlib import Path
from typing import Any, TypeVar, cast

import tomli
import tomli_w

_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
CONFIG_DIR = _xdg_config_home / "spinerestore"
CONFIG_FILE = CONFIG_DIR / "config.toml"

ENV_PREFIX = "SPINERESTORE_"

DEFAULT_WORKERS = 0
DEFAULT_ATLAS_DIR = "atlas"
DEFAULT_SKEL_DIR = "skels"

_TRUTHY = {"1", "true", "yes", "on"}

T = TypeVar("T")


def _read_config_file() -> dict[str, Any]:
    """Read the TOML config file if it exists, returning a (nested) dict."""

    if not CONFIG_FILE.exists():
        return {}
    with CONFIG_FILE.open("rb") as f:
        return tomli.load(f)


def _lookup_nested(data: dict[str, Any], dotted_key: str) -> Any | None:
    """Retrieve a nested value from *data* given a dotted key path.

    Example: dotted_key="layout.atlas_dir" will attempt
    ``data["layout"]["atlas_dir"]`` returning None if any level is missing.
    """

    current: Any = data
    for part in dotted_key.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def _make_env_var_name(dotted_key: str, prefix: str = ENV_PREFIX) -> str:
    """Convert a dotted key path to an uppercase ENV var name.

    Example: "layout.atlas_dir" -> "SPINERESTORE_LAYOUT_ATLAS_DIR".
    """

    return prefix + dotted_key.replace(".", "_").upper()


def _coerce(value: Any, default: T) -> T:
    """Coerce a raw env/config *value* to the type of *default*.

    Values that cannot be converted fall back to *default*.
    """
    # bool before int: bool is a subclass of int
    if isinstance(default, bool):
        if isinstance(value, bool):
            return cast(T, value)
        if isinstance(value, str):
            return cast(T, value.strip().lower() in _TRUTHY)
        return default
    if isinstance(default, int):
        if isinstance(value, int) and not isinstance(value, bool):
            return cast(T, value)
        if isinstance(value, str):
            with contextlib.suppress(ValueError):
                return cast(T, int(value))
        return default
    if isinstance(default, float):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return cast(T, float(value))
        if isinstance(value, str):
            with contextlib.suppress(ValueError):
                return cast(T, float(value))
        return default
    if isinstance(default, Path):
        return cast(T, Path(str(value)).expanduser())
    if isinstance(default, str):
        return cast(T, str(value))
    return cast(T, value)


def resolve_setting(
    key: str,
    *,
    default: T,
    cli_value: T | None = None,
) -> T:
    """Resolve a configuration *key* using precedence CLI > env > config > default.

    Args:
        key: Dotted key path, e.g. ``"workers"`` or ``"layout.atlas_dir"``.
        default: Value to fall back to when no overrides found.
        cli_value: Value passed from CLI option (``None`` when not provided).

    Returns:
        The resolved value with type matching *default* (or *cli_value*).
    """

    if cli_value is not None:
        return cli_value

    env_var = _make_env_var_name(key)
    if env_var in os.environ:
        return _coerce(os.environ[env_var], default)

    file_val = _lookup_nested(_read_config_file(), key)
    if file_val is not None:
        return _coerce(file_val, default)

    return default


def set_setting(key: str, value: Any) -> None:
    """Persist *value* under the dotted *key* in config.toml.

    Args:
        key: Dotted key path; intermediate tables are created as needed.
        value: A TOML-serializable value.

    Raises:
        ValueError: If an intermediate key already holds a non-table value.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    data = _read_config_file()
    parts = key.split(".")
    table = data
    for part in parts[:-1]:
        child = table.setdefault(part, {})
        if not isinstance(child, dict):
            raise ValueError(f"Config key {part!r} is not a table")
        table = child
    table[parts[-1]] = value
    with CONFIG_FILE.open("wb") as f:
        tomli_w.dump(data, f)


def parse_setting_value(raw: str) -> Any:
    """Interpret a CLI-provided string as bool, int, float or str."""
    lowered = raw.strip().lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    with contextlib.suppress(ValueError):
        return int(raw)
    with contextlib.suppress(ValueError):
        return float(raw)
    return raw


def resolve_workers(cli_value: int | None = None) -> int:
    """Return the worker pool size, mapping 0 to the CPU count."""
    workers = resolve_setting("workers", default=DEFAULT_WORKERS, cli_value=cli_value)
    if workers <= 0:
        return os.cpu_count() or 1
    return workers
