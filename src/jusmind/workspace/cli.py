"""CLI entry point for workspace and config bootstrap."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from jusmind import config as config_mod
from jusmind.core import workspace as workspace_mod


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jusmind init",
        description=(
            "Create the jusmind workspace and write a starter jusmind.toml."
        ),
    )
    parser.add_argument(
        "--path",
        type=Path,
        help="Override the workspace root (defaults to JUSMIND_HOME or ~/.jusmind).",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing jusmind.toml with the template.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational output on success.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        layout = workspace_mod.ensure_workspace(path=args.path)
    except workspace_mod.WorkspaceError as exc:
        sys.stderr.write(f"{exc}\n")
        return 2

    config_path = layout.config_file
    if config_path.exists() and not args.force:
        config_status = "exists"
    else:
        config_mod.write_template(config_path, overwrite=True)
        config_status = "written"

    if args.quiet:
        return 0

    lines = [f"Workspace ready at {layout.home}"]
    width = max(len(name) for name in layout.directories)
    for name, directory in layout.directories.items():
        lines.append(f"  {name.ljust(width)}  {directory}")
    lines.append(f"Config: {config_path} ({config_status})")
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
