"""Generation Client - the single outbound call to the OpenAI API.

Each call to `generate` makes at most one request. There is no retry, no
caching and no deduplication here; a failed generation needs a fresh
submission from the user.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from openai import AsyncOpenAI

from .common import NO_CODE_PLACEHOLDER, get_openai_api_key, get_openai_endpoint
from .errors import (
    GENERIC_GENERATION_MESSAGE,
    ConfigurationError,
    FailureKind,
    GenerationError,
)
from .models import GenerationFailure, GenerationRequest, GenerationResult, GenerationSuccess

logger = logging.getLogger(__name__)


ClientFactory = Callable[[str, Optional[str]], Any]


def _default_client_factory(api_key: str, base_url: Optional[str]) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=api_key, base_url=base_url)


class GenerationClient:
    """Sends a GenerationRequest to the model and returns a GenerationResult."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        """Initialize the client.

        Args:
            api_key: OpenAI API key. If None, OPENAI_API_KEY is read on every call.
            base_url: Optional endpoint override. If None, OPENAI_ENDPOINT is used.
            client_factory: Builds the SDK client from (api_key, base_url).
                Tests pass a factory returning a fake.
        """
        self.api_key = api_key
        self.base_url = base_url
        self._client_factory = client_factory or _default_client_factory
        self._client: Any = None
        self._client_key: Optional[str] = None

    def _resolve_client(self, api_key: str) -> Any:
        if self._client is None or self._client_key != api_key:
            self._client = self._client_factory(api_key, self.base_url or get_openai_endpoint())
            self._client_key = api_key
        return self._client

    async def _request_text(self, request: GenerationRequest) -> Optional[str]:
        # Raises ConfigurationError before any client exists.
        api_key = self.api_key or get_openai_api_key()
        config = request.config

        logger.info(f"Model: {config.model} (reasoning effort: {config.reasoning_effort})")
        logger.info(f"Prompt version: {request.prompt_version}")
        try:
            client = self._resolve_client(api_key)
            logger.info("Calling OpenAI API...")
            response = await client.chat.completions.create(
                model=config.model,
                messages=request.to_messages(),
                reasoning_effort=config.reasoning_effort,
                max_completion_tokens=config.max_completion_tokens,
            )
            text = response.choices[0].message.content
            if text is not None and not isinstance(text, str):
                raise TypeError(f"Unexpected content type: {type(text).__name__}")
        except Exception as e:
            logger.error(f"OpenAI API error: {type(e).__name__}: {e}")
            raise GenerationError(GENERIC_GENERATION_MESSAGE) from e

        logger.info("OpenAI API call successful")
        return text

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Generate Expert Advisor source for a composed request.

        Returns:
            GenerationSuccess with the raw model text, or GenerationFailure with
            a message that is safe to show the user.
        """
        logger.info("-" * 60)
        logger.info("GENERATING EXPERT ADVISOR")
        logger.info("-" * 60)

        try:
            text = await self._request_text(request)
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            return GenerationFailure(kind=FailureKind.CONFIGURATION, message=str(e))
        except GenerationError as e:
            return GenerationFailure(kind=FailureKind.GENERATION, message=str(e))

        if not text or not text.strip():
            logger.warning("Model returned no text")
            return GenerationSuccess(text=NO_CODE_PLACEHOLDER, degenerate=True)

        logger.info(f"Raw response length: {len(text)} chars")
        return GenerationSuccess(text=text)


def get_generation_client(
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
) -> GenerationClient:
    """Factory function to create a GenerationClient instance."""
    return GenerationClient(api_key=api_key, base_url=base_url)
