from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from fixtures import OpenAIStub, ScriptedBackend  # noqa: E402

from jusmind.generation.client import GenerationClient  # noqa: E402


@pytest.fixture
def backend() -> ScriptedBackend:
    return ScriptedBackend()


@pytest.fixture
def client(backend: ScriptedBackend) -> GenerationClient:
    return GenerationClient(backend, logger=logging.getLogger("jusmind.test"))


@pytest.fixture
def openai_stub() -> OpenAIStub:
    return OpenAIStub()


@pytest.fixture
def jusmind_home(tmp_path, monkeypatch) -> Path:
    home = tmp_path / "jusmind-home"
    monkeypatch.setenv("JUSMIND_HOME", str(home))
    monkeypatch.delenv("JUSMIND_CONFIG", raising=False)
    return home


@pytest.fixture(autouse=True)
def _release_jusmind_handlers() -> Iterator[None]:
    yield
    logger = logging.getLogger("jusmind")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
