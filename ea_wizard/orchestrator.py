"""Generation Orchestrator - runs compose -> generate -> normalize for one submission.

Lifecycle:
    IDLE -> IN_FLIGHT -> SUCCEEDED | FAILED
    SUCCEEDED | FAILED -> IN_FLIGHT on the next submission

No state is terminal. Each submission gets a sequence number; when a newer
submission starts before an older call returns, the older result is dropped.
The orchestrator does not lock: the shell is expected to disable resubmission
while `can_submit` is False.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Protocol

from .common import NO_CODE_PLACEHOLDER
from .errors import (
    GENERIC_COMPOSITION_MESSAGE,
    GENERIC_GENERATION_MESSAGE,
    FailureKind,
    SubmissionRejected,
)
from .models import (
    GenerationFailure,
    GenerationRequest,
    GenerationResult,
    GenerationSuccess,
    StrategyParameters,
)
from .normalizer import normalize
from .prompt_composer import compose

logger = logging.getLogger(__name__)


CANCELLED_MESSAGE = "Generation was cancelled. Please try again."


class GenerationState(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class TextGenerator(Protocol):
    """Anything that turns a GenerationRequest into a GenerationResult."""

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        ...


@dataclass(frozen=True)
class GenerationSnapshot:
    """What the shell should display right now.

    `code` is set only when SUCCEEDED, `error` only when FAILED.
    """
    state: GenerationState
    sequence: int = 0
    code: Optional[str] = None
    error: Optional[str] = None
    failure_kind: Optional[FailureKind] = None
    degenerate: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "sequence": self.sequence,
            "code": self.code,
            "error": self.error,
            "errorType": self.failure_kind.value if self.failure_kind else None,
            "degenerate": self.degenerate,
        }


class GenerationOrchestrator:
    """Owns the current generation result and its lifecycle state."""

    def __init__(
        self,
        client: TextGenerator,
        composer: Callable[[StrategyParameters], GenerationRequest] = compose,
        normalizer: Callable[[str], str] = normalize,
    ):
        self._client = client
        self._composer = composer
        self._normalizer = normalizer
        self._sequence = 0
        self._snapshot = GenerationSnapshot(state=GenerationState.IDLE)

    @property
    def snapshot(self) -> GenerationSnapshot:
        return self._snapshot

    @property
    def state(self) -> GenerationState:
        return self._snapshot.state

    @property
    def can_submit(self) -> bool:
        return self._snapshot.state != GenerationState.IN_FLIGHT

    async def submit(self, params: StrategyParameters) -> GenerationSnapshot:
        """Run one generation cycle for `params`.

        Raises:
            SubmissionRejected: If the strategy description is empty. Nothing
                is composed or sent and the state is left as it was.

        Returns:
            The snapshot after this submission settles. If a newer submission
            started meanwhile, the newer one's current snapshot is returned and
            this result is discarded.
        """
        if not params.has_description:
            raise SubmissionRejected("Strategy description is required.")

        self._sequence += 1
        sequence = self._sequence
        # Clear any previous code or error before the call starts.
        self._snapshot = GenerationSnapshot(state=GenerationState.IN_FLIGHT, sequence=sequence)

        logger.info("=" * 60)
        logger.info(f"SUBMISSION #{sequence}")
        logger.info("=" * 60)
        logger.info(f"Symbol: {params.symbol or '(current)'}")
        logger.info(f"Timeframe: {params.timeframe.value}")
        logger.info(f"Description length: {len(params.strategy_description)} chars")

        try:
            request = self._composer(params)
        except Exception:
            logger.exception("Failed to compose generation request")
            return self._settle(
                sequence,
                GenerationFailure(kind=FailureKind.COMPOSITION, message=GENERIC_COMPOSITION_MESSAGE),
            )

        try:
            result = await self._client.generate(request)
        except asyncio.CancelledError:
            self._settle(
                sequence,
                GenerationFailure(kind=FailureKind.GENERATION, message=CANCELLED_MESSAGE),
            )
            raise
        except Exception:
            logger.exception("Generation client raised instead of returning a failure")
            result = GenerationFailure(kind=FailureKind.GENERATION, message=GENERIC_GENERATION_MESSAGE)

        return self._settle(sequence, result)

    def _settle(self, sequence: int, result: GenerationResult) -> GenerationSnapshot:
        if sequence != self._sequence:
            logger.info(f"Dropping stale result for submission #{sequence} (current: #{self._sequence})")
            return self._snapshot

        if isinstance(result, GenerationSuccess):
            code = self._normalizer(result.text)
            degenerate = result.degenerate
            if not code.strip():
                # Fence-only replies normalize to nothing.
                logger.warning(f"Submission #{sequence} normalized to empty code")
                code = NO_CODE_PLACEHOLDER
                degenerate = True
            self._snapshot = GenerationSnapshot(
                state=GenerationState.SUCCEEDED,
                sequence=sequence,
                code=code,
                degenerate=degenerate,
            )
            logger.info(f"Submission #{sequence} succeeded ({len(code)} chars)")
        else:
            self._snapshot = GenerationSnapshot(
                state=GenerationState.FAILED,
                sequence=sequence,
                error=result.message,
                failure_kind=result.kind,
            )
            logger.warning(f"Submission #{sequence} failed: {result.kind.value}")
        return self._snapshot
