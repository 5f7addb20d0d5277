"""Generate tool - turns a strategy form submission into Expert Advisor code.

Workflow:
1. Tool arguments are validated into StrategyParameters
2. The orchestrator composes the prompt and calls the model
3. The returned text is normalized into plain MQL5 source
4. Highlighted markup and a download payload are attached for the widget
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .common import DOWNLOAD_FILENAME
from .export import ExportedCode
from .highlighter import highlight
from .models import StrategyParameters, Timeframe
from .orchestrator import GenerationOrchestrator, GenerationSnapshot, GenerationState, TextGenerator
from .prompt_composer import PROMPT_VERSION
from .templates import get_template

logger = logging.getLogger(__name__)


GENERATE_TOOL_NAME = "generate_expert_advisor"
TEMPLATES_TOOL_NAME = "list_strategy_templates"

TimeframeName = Literal["M1", "M5", "M15", "M30", "H1", "H4", "D1"]

GENERATE_TOOL_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "strategy_description": {
            "type": "string",
            "description": "Natural language trading logic. Example: 'Buy when RSI(14) crosses above 30, sell when it crosses below 70'.",
        },
        "template": {
            "type": "string",
            "description": "Optional starter template key (custom, crt, rsi, ma). Used when strategy_description is empty.",
        },
        "symbol": {
            "type": "string",
            "description": "Instrument, e.g. 'EURUSD'. Leave empty for the chart the EA is attached to.",
            "default": "",
        },
        "timeframe": {
            "type": "string",
            "description": "Chart timeframe",
            "enum": [tf.name for tf in Timeframe],
            "default": "H1",
        },
        "lot_size": {
            "type": "number",
            "description": "Initial lot size",
            "default": 0.1,
            "exclusiveMinimum": 0,
        },
        "stop_loss_points": {
            "type": "integer",
            "description": "Stop loss distance in points",
            "default": 100,
            "minimum": 0,
        },
        "take_profit_points": {
            "type": "integer",
            "description": "Take profit distance in points",
            "default": 200,
            "minimum": 0,
        },
        "use_trailing_stop": {
            "type": "boolean",
            "description": "Trail the stop loss",
            "default": False,
        },
    },
    "additionalProperties": False,
}

TEMPLATES_TOOL_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {},
    "additionalProperties": False,
}


class GenerateInput(BaseModel):
    """Schema for the generate tool."""

    strategy_description: str = Field(
        default="",
        description="Natural language trading logic",
    )
    template: Optional[str] = Field(
        default=None,
        description="Starter template key, used when strategy_description is empty",
    )
    symbol: str = Field(default="", description="Instrument identifier")
    timeframe: TimeframeName = Field(default="H1", description="Chart timeframe")
    lot_size: float = Field(default=0.1, gt=0, allow_inf_nan=False, description="Initial lot size")
    stop_loss_points: int = Field(default=100, ge=0, description="Stop loss in points")
    take_profit_points: int = Field(default=200, ge=0, description="Take profit in points")
    use_trailing_stop: bool = Field(default=False, description="Trail the stop loss")

    model_config = ConfigDict(extra="forbid")

    def to_parameters(self) -> StrategyParameters:
        """Build StrategyParameters, filling an empty description from the template."""
        description = self.strategy_description
        if not description.strip() and self.template:
            description = get_template(self.template).content
        return StrategyParameters(
            strategy_description=description,
            symbol=self.symbol.strip(),
            timeframe=Timeframe[self.timeframe],
            lot_size=self.lot_size,
            stop_loss_points=self.stop_loss_points,
            take_profit_points=self.take_profit_points,
            use_trailing_stop=self.use_trailing_stop,
        )


def build_structured_content(snapshot: GenerationSnapshot) -> Dict[str, Any]:
    """Widget payload: snapshot plus highlighted markup and download info."""
    content = snapshot.to_dict()
    content["promptVersion"] = PROMPT_VERSION
    if snapshot.code is not None:
        content["highlighted"] = highlight(snapshot.code)
        content["download"] = ExportedCode(code=snapshot.code).to_dict()
    return content


def format_result_text(snapshot: GenerationSnapshot) -> str:
    """Short text summary for clients that do not render the widget."""
    if snapshot.state == GenerationState.FAILED:
        return f"Generation Failed: {snapshot.error}"
    if snapshot.state != GenerationState.SUCCEEDED:
        return "Writing Code..."
    if snapshot.degenerate:
        return "The model returned no code. Adjust the strategy description and try again."
    lines = (snapshot.code or "").count("\n") + 1
    return f"Expert Advisor generated ({lines} lines). Save it as {DOWNLOAD_FILENAME}."


async def run_generation(
    payload: GenerateInput,
    client: TextGenerator,
) -> Tuple[GenerationSnapshot, Dict[str, Any]]:
    """Execute one generation cycle for a tool call.

    Raises:
        SubmissionRejected: If no strategy description could be resolved.
        ValueError: If the template key is unknown.
    """
    logger.info("=" * 80)
    logger.info("EXPERT ADVISOR GENERATION STARTED")
    logger.info("=" * 80)

    params = payload.to_parameters()
    # One orchestrator per call: the server is stateless HTTP, so concurrent
    # calls come from unrelated clients and must not supersede each other.
    orchestrator = GenerationOrchestrator(client)
    snapshot = await orchestrator.submit(params)

    logger.info(f"Generation finished in state: {snapshot.state.value}")
    return snapshot, build_structured_content(snapshot)
