"""Workspace directory layout for jusmind configs and logs."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

__all__ = [
    "WORKSPACE_ENV",
    "DEFAULT_WORKSPACE",
    "WorkspaceError",
    "WorkspaceLayout",
    "ensure_workspace",
]

WORKSPACE_ENV = "JUSMIND_HOME"
DEFAULT_WORKSPACE = Path.home() / ".jusmind"

_SUBDIRS = ("config", "logs")


class WorkspaceError(RuntimeError):
    """Raised when the workspace layout cannot be prepared."""


@dataclass(frozen=True)
class WorkspaceLayout:
    """Resolved workspace root plus its named subdirectories."""

    home: Path
    directories: Mapping[str, Path]

    def path_for(self, key: str) -> Path:
        try:
            return self.directories[key]
        except KeyError as exc:
            raise WorkspaceError(
                f"Unknown workspace directory '{key}'."
            ) from exc

    @property
    def config_file(self) -> Path:
        return self.path_for("config") / "jusmind.toml"


def ensure_workspace(
    *,
    env: Mapping[str, str] | None = None,
    path: Path | None = None,
    create: bool = True,
) -> WorkspaceLayout:
    """Resolve (and by default create) the workspace directories.

    When the default location is not writable the layout falls back to a
    directory under the system temp dir. Explicit overrides never fall back.
    """

    env_map = os.environ if env is None else env
    base, explicit = _resolve_base(env_map, path)
    candidates = [base]
    if create and not explicit:
        candidates.append(Path(tempfile.gettempdir()) / "jusmind")

    last_error: Exception | None = None
    for candidate in candidates:
        try:
            return _materialize(candidate, create=create)
        except PermissionError as exc:
            last_error = exc
    raise WorkspaceError(f"Unable to prepare workspace at {base}") from (
        last_error
    )


def _resolve_base(
    env: Mapping[str, str], override: Path | None
) -> tuple[Path, bool]:
    if override is not None:
        return override.expanduser().absolute(), True
    custom = (env.get(WORKSPACE_ENV) or "").strip()
    if custom:
        return Path(custom).expanduser().absolute(), True
    return DEFAULT_WORKSPACE, False


def _materialize(base: Path, *, create: bool) -> WorkspaceLayout:
    if base.exists() and not base.is_dir():
        raise WorkspaceError(
            f"Configured workspace exists and is not a directory: {base}"
        )
    directories = {name: base / name for name in _SUBDIRS}
    if create:
        for directory in (base, *directories.values()):
            if directory.exists() and not directory.is_dir():
                raise WorkspaceError(
                    f"Expected directory but found a file: {directory}"
                )
            directory.mkdir(parents=True, exist_ok=True)
            try:
                directory.chmod(0o700)
            except (PermissionError, NotImplementedError):
                pass
    return WorkspaceLayout(
        home=base,
        directories=MappingProxyType(directories),
    )
