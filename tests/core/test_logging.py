from __future__ import annotations

import json
import logging
from pathlib import Path

from jusmind.core import logging as core_logging


def _close(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_configure_logger_writes_json_lines(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "jusmind.test_json",
        log_dir=tmp_path / "logs",
        filename="test.log",
    )

    logger.info("hello", extra={"event": "unit", "count": 3})

    class _Opaque:
        def __repr__(self):  # noqa: D401
            return "opaque"

    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception(
            "with error",
            extra={"paths": [Path(tmp_path), 1], "obj": _Opaque()},
        )
    for handler in logger.handlers:
        handler.flush()

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    first = json.loads(lines[0])
    assert first["message"] == "hello"
    assert first["level"] == "INFO"
    assert first["logger"] == "jusmind.test_json"
    assert first["extra"] == {"event": "unit", "count": 3}

    last = json.loads(lines[-1])
    assert "ValueError: boom" in last["exception"]
    assert last["extra"]["obj"] == "opaque"
    assert last["extra"]["paths"] == [str(tmp_path), 1]

    _close(logger)


def test_configure_logger_respects_level(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "jusmind.test_level",
        log_dir=tmp_path,
        level="WARNING",
        filename="level.log",
    )
    logger.info("hidden")
    logger.warning("shown")
    for handler in logger.handlers:
        handler.flush()

    messages = [
        json.loads(line)["message"]
        for line in log_path.read_text(encoding="utf-8").splitlines()
    ]
    assert messages == ["shown"]
    _close(logger)


def test_configure_logger_is_idempotent_and_toggles_console(tmp_path):
    name = "jusmind.test_console"
    logger, _ = core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=True, filename="c.log"
    )
    again, _ = core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=True, filename="c.log"
    )
    assert again is logger
    kinds = sorted(
        getattr(handler, "_jusmind_handler") for handler in logger.handlers
    )
    assert kinds == ["console", "file"]

    core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=False, filename="c.log"
    )
    kinds = [getattr(handler, "_jusmind_handler") for handler in logger.handlers]
    assert kinds == ["file"]
    _close(logger)


def test_configure_logger_falls_back_when_unwritable(tmp_path, monkeypatch):
    fallback = tmp_path / "fallback"
    monkeypatch.setattr(core_logging, "_fallback_log_dir", lambda: fallback)

    real_mkdir = Path.mkdir
    blocked = tmp_path / "blocked"

    def _mkdir(self, *args, **kwargs):
        if self == blocked:
            raise PermissionError("denied")
        return real_mkdir(self, *args, **kwargs)

    monkeypatch.setattr(Path, "mkdir", _mkdir)

    logger, log_path = core_logging.configure_logger(
        "jusmind.test_fallback", log_dir=blocked, filename="f.log"
    )
    assert log_path.parent == fallback
    _close(logger)


def test_default_filename_uses_last_logger_segment(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "jusmind.sub.part", log_dir=tmp_path
    )
    assert log_path.name == "part.log"
    _close(logger)
