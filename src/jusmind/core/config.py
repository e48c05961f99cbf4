"""TOML helpers shared by the jusmind configuration layer."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, Mapping

import tomllib

__all__ = [
    "ConfigError",
    "load_toml",
    "merge_defaults",
    "write_toml_template",
]


class ConfigError(RuntimeError):
    """Raised when configuration IO, parsing or validation fails."""


def load_toml(path: Path) -> Dict[str, Any]:
    """Read ``path`` as TOML; a missing or malformed file is a ConfigError."""
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse config TOML {path}: {exc}") from exc


def merge_defaults(
    defaults: Mapping[str, Any],
    override: Mapping[str, Any],
    *,
    prefix: str = "",
) -> Dict[str, Any]:
    """Return ``defaults`` with ``override`` laid over it.

    Only keys present in ``defaults`` are accepted, and tables must stay
    tables (and scalars scalars). Neither input is modified.
    """

    merged = copy.deepcopy(dict(defaults))
    for key, value in override.items():
        dotted = prefix + key
        if key not in merged:
            raise ConfigError(f"Unknown configuration key '{dotted}'.")
        expects_table = isinstance(merged[key], Mapping)
        if expects_table != isinstance(value, Mapping):
            wanted = "table" if expects_table else "value"
            raise ConfigError(
                f"Expected {wanted} for '{dotted}', "
                f"found {type(value).__name__}."
            )
        if expects_table:
            merged[key] = merge_defaults(
                merged[key], value, prefix=f"{dotted}."
            )
        else:
            merged[key] = value
    return merged


def write_toml_template(
    path: Path,
    *,
    template: str,
    overwrite: bool = False,
    mode: int = 0o600,
) -> Path:
    """Write ``template`` to ``path`` with restricted permissions.

    An existing file is only replaced when ``overwrite`` is set.
    """

    if path.exists() and not overwrite:
        raise ConfigError(f"Config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(template, encoding="utf-8")
    path.chmod(mode)
    return path
