"""Configuration for the jusmind tutor.

Settings live in ``jusmind.toml`` under the workspace ``config/`` directory.
The file is optional: every key has a default and the TOML only overrides
what it names. Unknown keys are rejected so typos surface early.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .core.config import (
    ConfigError,
    load_toml,
    merge_defaults,
    write_toml_template,
)
from .core.workspace import WorkspaceLayout, ensure_workspace

__all__ = [
    "CONFIG_PATH_ENV",
    "ConfigError",
    "OpenAIConfig",
    "RetryConfig",
    "ChatConfig",
    "LoggingConfig",
    "TutorConfig",
    "config_template",
    "default_tree",
    "load_config",
    "resolve_config_path",
    "write_template",
]

CONFIG_PATH_ENV = "JUSMIND_CONFIG"

_CHAT_MODES = ("resolver", "socratic")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class OpenAIConfig:
    model: str
    temperature: float
    structured_temperature: float
    max_output_tokens: int
    request_timeout_seconds: int
    api_base: Optional[str]


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int
    initial_backoff_seconds: float
    backoff_multiplier: float
    max_backoff_seconds: float
    failure_threshold: int
    cooldown_seconds: float


@dataclass(frozen=True)
class ChatConfig:
    default_mode: str
    max_history_turns: int


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    verbose: bool


@dataclass(frozen=True)
class TutorConfig:
    openai: OpenAIConfig
    retry: RetryConfig
    chat: ChatConfig
    logging: LoggingConfig


def _require_positive_int(value: Any, *, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"'{field}' must be a positive integer.")
    return value


def _require_number(
    value: Any,
    *,
    field: str,
    min_value: float = 0.0,
    max_value: float | None = None,
) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{field}' must be a number.")
    number = float(value)
    if max_value is not None and not min_value <= number <= max_value:
        raise ConfigError(
            f"'{field}' must be between {min_value} and {max_value}."
        )
    if number < min_value:
        raise ConfigError(f"'{field}' must be at least {min_value}.")
    return number


def _require_bool(value: Any, *, field: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{field}' must be a boolean.")
    return value


def _require_string(value: Any, *, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{field}' must be a non-empty string.")
    return value.strip()


def _optional_string(value: Any, *, field: str) -> Optional[str]:
    if value is None:
        return None
    return _require_string(value, field=field)


def _build_openai(section: Mapping[str, Any]) -> OpenAIConfig:
    return OpenAIConfig(
        model=_require_string(section.get("model"), field="openai.model"),
        temperature=_require_number(
            section.get("temperature"),
            field="openai.temperature",
            max_value=2.0,
        ),
        structured_temperature=_require_number(
            section.get("structured_temperature"),
            field="openai.structured_temperature",
            max_value=2.0,
        ),
        max_output_tokens=_require_positive_int(
            section.get("max_output_tokens"),
            field="openai.max_output_tokens",
        ),
        request_timeout_seconds=_require_positive_int(
            section.get("request_timeout_seconds"),
            field="openai.request_timeout_seconds",
        ),
        api_base=_optional_string(
            section.get("api_base"), field="openai.api_base"
        ),
    )


def _build_retry(section: Mapping[str, Any]) -> RetryConfig:
    multiplier = _require_number(
        section.get("backoff_multiplier"),
        field="retry.backoff_multiplier",
        min_value=1.0,
    )
    initial = _require_number(
        section.get("initial_backoff_seconds"),
        field="retry.initial_backoff_seconds",
    )
    ceiling = _require_number(
        section.get("max_backoff_seconds"),
        field="retry.max_backoff_seconds",
    )
    if ceiling < initial:
        raise ConfigError(
            "retry.max_backoff_seconds must not be smaller than "
            "retry.initial_backoff_seconds."
        )
    return RetryConfig(
        max_attempts=_require_positive_int(
            section.get("max_attempts"), field="retry.max_attempts"
        ),
        initial_backoff_seconds=initial,
        backoff_multiplier=multiplier,
        max_backoff_seconds=ceiling,
        failure_threshold=_require_positive_int(
            section.get("failure_threshold"), field="retry.failure_threshold"
        ),
        cooldown_seconds=_require_number(
            section.get("cooldown_seconds"), field="retry.cooldown_seconds"
        ),
    )


def _build_chat(section: Mapping[str, Any]) -> ChatConfig:
    mode = _require_string(
        section.get("default_mode"), field="chat.default_mode"
    ).lower()
    if mode not in _CHAT_MODES:
        raise ConfigError(
            "chat.default_mode must be one of: " + ", ".join(_CHAT_MODES)
        )
    return ChatConfig(
        default_mode=mode,
        max_history_turns=_require_positive_int(
            section.get("max_history_turns"), field="chat.max_history_turns"
        ),
    )


def _build_logging(section: Mapping[str, Any]) -> LoggingConfig:
    level = _require_string(section.get("level"), field="logging.level")
    level = level.upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(
            "logging.level must be one of " + ", ".join(_LOG_LEVELS) + "."
        )
    verbose = _require_bool(section.get("verbose"), field="logging.verbose")
    return LoggingConfig(level=level, verbose=verbose)


def _build_config(tree: Mapping[str, Any]) -> TutorConfig:
    return TutorConfig(
        openai=_build_openai(tree["openai"]),
        retry=_build_retry(tree["retry"]),
        chat=_build_chat(tree["chat"]),
        logging=_build_logging(tree["logging"]),
    )


def resolve_config_path(
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
    layout: WorkspaceLayout | None = None,
) -> Path:
    env_map = os.environ if env is None else env
    if explicit_path is not None:
        return explicit_path.expanduser().resolve()
    env_override = (env_map.get(CONFIG_PATH_ENV) or "").strip()
    if env_override:
        return Path(env_override).expanduser().resolve()
    if layout is None:
        layout = ensure_workspace(env=env_map, create=False)
    return layout.config_file


def load_config(
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
    layout: WorkspaceLayout | None = None,
) -> TutorConfig:
    """Load the TOML config over the defaults and validate it.

    An explicitly requested file must exist; the implicit workspace file is
    optional.
    """

    path = resolve_config_path(
        explicit_path=explicit_path, env=env, layout=layout
    )
    tree = default_tree()
    if explicit_path is not None or path.exists():
        tree = merge_defaults(tree, load_toml(path))
    return _build_config(tree)


def default_tree() -> Dict[str, Any]:
    """Return a copy of the default configuration tree."""

    return copy.deepcopy(_DEFAULTS)


def config_template() -> str:
    """Return the TOML template written by ``jusmind init``."""

    return _CONFIG_TEMPLATE.strip() + "\n"


def write_template(path: Path, *, overwrite: bool = False) -> Path:
    return write_toml_template(
        path, template=config_template(), overwrite=overwrite
    )


_DEFAULTS: Dict[str, Any] = {
    "openai": {
        "model": "gpt-4o-mini",
        "temperature": 0.4,
        "structured_temperature": 0.5,
        "max_output_tokens": 4000,
        "request_timeout_seconds": 60,
        "api_base": None,
    },
    "retry": {
        "max_attempts": 3,
        "initial_backoff_seconds": 1.0,
        "backoff_multiplier": 2.0,
        "max_backoff_seconds": 8.0,
        "failure_threshold": 5,
        "cooldown_seconds": 30.0,
    },
    "chat": {
        "default_mode": "resolver",
        "max_history_turns": 20,
    },
    "logging": {
        "level": "INFO",
        "verbose": False,
    },
}


_CONFIG_TEMPLATE = """
# JusMind tutor configuration

[openai]
model = "gpt-4o-mini"
# Sampling temperature for tutoring replies and lessons (0.0-2.0)
temperature = 0.4
# Sampling temperature for generated question sets
structured_temperature = 0.5
max_output_tokens = 4000
request_timeout_seconds = 60
# Optional API base override
# api_base = "https://api.openai.com/v1"

[retry]
# Attempts per generation call before giving up
max_attempts = 3
initial_backoff_seconds = 1.0
backoff_multiplier = 2.0
max_backoff_seconds = 8.0
# Consecutive failed calls that open the circuit breaker
failure_threshold = 5
cooldown_seconds = 30.0

[chat]
# "resolver" (doctrinal answers) or "socratic" (guided questions)
default_mode = "resolver"
# Prior turns sent with each question
max_history_turns = 20

[logging]
level = "INFO"
verbose = false
"""
