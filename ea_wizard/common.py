"""Shared constants and environment helpers for the generation pipeline."""

from __future__ import annotations

import os
from typing import Optional

from .errors import ConfigurationError


OPENAI_API_KEY_ENV = "OPENAI_API_KEY"
OPENAI_ENDPOINT_ENV = "OPENAI_ENDPOINT"

# Fixed generation settings. These are not user-configurable.
GENERATION_MODEL = "gpt-5.1"
REASONING_EFFORT = "high"
MAX_COMPLETION_TOKENS = 16000

DOWNLOAD_FILENAME = "ExpertAdvisor.mq5"
DOWNLOAD_MIME_TYPE = "text/plain"

NO_CODE_PLACEHOLDER = "// Error: No code generated."


def get_openai_api_key() -> str:
    """Get the OpenAI API key from environment."""
    api_key = os.getenv(OPENAI_API_KEY_ENV)
    if not api_key:
        raise ConfigurationError(
            f"API key is missing. Set {OPENAI_API_KEY_ENV} in environment/.env"
        )
    return api_key


def get_openai_endpoint() -> Optional[str]:
    """Optional base URL override for OpenAI-compatible endpoints."""
    return os.getenv(OPENAI_ENDPOINT_ENV) or None
