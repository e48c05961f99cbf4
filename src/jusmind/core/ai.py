"""OpenAI client bootstrap shared by the generation backends."""

from __future__ import annotations

import os
from typing import Any, Mapping

from dotenv import load_dotenv
from openai import OpenAI

__all__ = ["API_KEY_ENV", "load_client"]

API_KEY_ENV = "OPENAI_API_KEY"


def load_client(
    *,
    api_base: str | None = None,
    env: Mapping[str, str] | None = None,
    max_retries: int | None = None,
) -> Any:
    """Initialize an OpenAI client using environment-derived credentials.

    ``max_retries`` overrides the SDK's own retry count; pass 0 when an
    outer retry policy already wraps the client.
    """
    if env is None:
        load_dotenv()
        env = os.environ
    api_key = env.get(API_KEY_ENV)
    if not api_key:
        raise RuntimeError(
            f"{API_KEY_ENV} not found in environment. Set it or add to .env"
        )
    options: dict[str, Any] = {"api_key": api_key}
    if api_base:
        options["base_url"] = api_base
    if max_retries is not None:
        options["max_retries"] = max_retries
    return OpenAI(**options)
