"""Wire configuration, logging and the generation stack for CLI commands."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .config import ConfigError, TutorConfig, load_config
from .core.logging import configure_logger
from .core.workspace import WorkspaceError, ensure_workspace
from .generation.backend import CompletionBackend, OpenAIBackend
from .generation.client import GenerationClient
from .generation.policy import ResilientBackend, RetryPolicy

__all__ = [
    "LOGGER_NAME",
    "TutorRuntime",
    "add_config_argument",
    "build_runtime",
    "runtime_from_args",
]

LOGGER_NAME = "jusmind"


@dataclass(frozen=True)
class TutorRuntime:
    config: TutorConfig
    client: GenerationClient
    logger: logging.Logger
    log_path: Path


def add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        help=(
            "Path to jusmind.toml (defaults to JUSMIND_CONFIG or the "
            "workspace config directory)."
        ),
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log records to stderr.",
    )


def build_runtime(
    *,
    config_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
    backend: CompletionBackend | None = None,
    verbose: bool = False,
) -> TutorRuntime:
    """Load config, attach the JSON log file and build the client.

    ``backend`` replaces the OpenAI adapter; the retry policy still wraps
    whatever backend is used.
    """

    layout = ensure_workspace(env=env)
    config = load_config(explicit_path=config_path, env=env, layout=layout)
    logger, log_path = configure_logger(
        LOGGER_NAME,
        log_dir=layout.path_for("logs"),
        level=config.logging.level,
        verbose=verbose or config.logging.verbose,
    )
    if backend is None:
        openai_cfg = config.openai
        backend = OpenAIBackend(
            model=openai_cfg.model,
            temperature=openai_cfg.temperature,
            structured_temperature=openai_cfg.structured_temperature,
            max_output_tokens=openai_cfg.max_output_tokens,
            request_timeout=openai_cfg.request_timeout_seconds,
            api_base=openai_cfg.api_base,
            max_retries=0,
        )
    generation_logger = logger.getChild("generation")
    resilient = ResilientBackend(
        backend,
        RetryPolicy.from_config(config.retry),
        logger=generation_logger,
    )
    client = GenerationClient(resilient, logger=generation_logger)
    logger.debug(
        "Runtime ready",
        extra={"model": config.openai.model, "log_path": log_path},
    )
    return TutorRuntime(
        config=config,
        client=client,
        logger=logger,
        log_path=log_path,
    )


def runtime_from_args(args: argparse.Namespace) -> TutorRuntime:
    """Build the runtime for a CLI command or exit with a status code.

    Configuration and workspace problems exit with 2; a missing API key or
    client library exits with 1.
    """

    try:
        return build_runtime(
            config_path=getattr(args, "config", None),
            verbose=bool(getattr(args, "verbose", False)),
        )
    except (ConfigError, WorkspaceError) as exc:
        _print_error(f"Configuration error: {exc}")
        raise SystemExit(2) from exc
    except RuntimeError as exc:
        _print_error(str(exc))
        raise SystemExit(1) from exc


def _print_error(message: str) -> None:
    sys.stderr.write(message + "\n")
