"""Data models for the Expert Advisor generation pipeline.

Architecture Flow:
    StrategyParameters -> Prompt Composer -> Generation Client -> Code Normalizer
    -> Lexical Highlighter (display only)

Every value here lives for a single submission cycle and is never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from .common import GENERATION_MODEL, MAX_COMPLETION_TOKENS, REASONING_EFFORT
from .errors import FailureKind


# =============================================================================
# Strategy Parameters (caller input)
# =============================================================================

class Timeframe(str, Enum):
    """Bar intervals supported by the target platform."""
    M1 = "PERIOD_M1"
    M5 = "PERIOD_M5"
    M15 = "PERIOD_M15"
    M30 = "PERIOD_M30"
    H1 = "PERIOD_H1"
    H4 = "PERIOD_H4"
    D1 = "PERIOD_D1"


class StrategyParameters(BaseModel):
    """A user's request for an Expert Advisor.

    Defaults mirror the entry form. An empty `symbol` means "whatever chart the
    EA is attached to"; the composer renders it as "Current Symbol".
    """

    strategy_description: str = Field(
        default="",
        description="Natural language trading logic",
    )
    symbol: str = Field(
        default="",
        description="Instrument identifier, e.g. 'EURUSD'. Empty for the current chart symbol.",
    )
    timeframe: Timeframe = Field(
        default=Timeframe.H1,
        description="Chart timeframe the EA runs on",
    )
    lot_size: float = Field(
        default=0.1,
        gt=0,
        allow_inf_nan=False,
        description="Initial position size in lots",
    )
    stop_loss_points: int = Field(
        default=100,
        ge=0,
        description="Stop loss distance in points",
    )
    take_profit_points: int = Field(
        default=200,
        ge=0,
        description="Take profit distance in points",
    )
    use_trailing_stop: bool = Field(
        default=False,
        description="Whether the EA should trail its stop loss",
    )

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def has_description(self) -> bool:
        return bool(self.strategy_description.strip())


# =============================================================================
# Generation Request (composer output)
# =============================================================================

class GenerationConfig(BaseModel):
    """Fixed settings sent with every generation call."""

    model: str = Field(default=GENERATION_MODEL)
    reasoning_effort: str = Field(default=REASONING_EFFORT)
    max_completion_tokens: int = Field(default=MAX_COMPLETION_TOKENS, gt=0)

    model_config = ConfigDict(extra="forbid", frozen=True)


class GenerationRequest(BaseModel):
    """System instruction plus composed user prompt for one submission."""

    system_instruction: str
    user_prompt: str
    config: GenerationConfig = Field(default_factory=GenerationConfig)
    prompt_version: str

    model_config = ConfigDict(extra="forbid", frozen=True)

    def to_messages(self) -> list[dict[str, str]]:
        """Chat messages in the order the service expects them."""
        return [
            {"role": "system", "content": self.system_instruction},
            {"role": "user", "content": self.user_prompt},
        ]


# =============================================================================
# Generation Result (client output)
# =============================================================================

@dataclass(frozen=True)
class GenerationSuccess:
    """Raw text returned by the service.

    `degenerate` is set when the service answered without any text; `text`
    then carries a placeholder comment instead.
    """
    text: str
    degenerate: bool = False


@dataclass(frozen=True)
class GenerationFailure:
    """A failed call, with a message safe to show the user."""
    kind: FailureKind
    message: str


GenerationResult = Union[GenerationSuccess, GenerationFailure]
