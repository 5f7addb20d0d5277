"""Prompt Composer - builds the generation request from strategy parameters.

The system instruction and the user prompt template are versioned constants.
Bump PROMPT_VERSION whenever either text changes so generated code can be
traced back to the prompt that produced it.
"""

from __future__ import annotations

from decimal import Decimal

from .models import GenerationConfig, GenerationRequest, StrategyParameters


PROMPT_VERSION = "1"

CURRENT_SYMBOL_LABEL = "Current Symbol"

SYSTEM_INSTRUCTION = """You are an expert senior MQL5 (MetaQuotes Language 5) developer.
You specialize in algorithmic trading systems including Price Action, Smart Money Concepts (SMC), ICT, and Candle Range Theory (CRT/TJR) principles.

Your task is to write robust, compilable, and professional-grade Expert Advisor (EA) code based on the user's trading strategy.

Follow these strict coding standards:
1. Use the 'CTrade' class from '<Trade/Trade.mqh>' for all order executions.
2. Structure the code properly with 'OnInit', 'OnDeinit', and 'OnTick' event handlers.
3. Use strict property definitions (e.g., '#property strict').
4. Include input variables for all user-configurable parameters (Lots, SL, TP, Magic Number, Trading Hours, etc.).
5. Implement error handling for trade requests.
6. Add comments explaining complex logic, especially for specific patterns like FVG (Fair Value Gaps), Order Blocks, or Liquidity Sweeps.
7. Ensure the code compiles without errors.
8. If the strategy involves indicators, use the standard library indicator functions (e.g., iRSI, iMA) and create their handles in OnInit.
9. For CRT/SMC strategies, implementing helper functions for logic like "IsFVG", "FindSwingHigh", "CheckTimeWindow", or "DetectMSS" (Market Structure Shift) is highly recommended.

The output must be ONLY the raw code string, or a Markdown code block containing the code."""

USER_PROMPT_TEMPLATE = """Generate an MQL5 Expert Advisor for the following requirements:

Symbol: {symbol}
Timeframe: {timeframe}
Initial Lot Size: {lot_size}
Stop Loss (points): {stop_loss_points}
Take Profit (points): {take_profit_points}
Trailing Stop: {trailing_stop}

Strategy Logic:
{strategy_description}

Ensure the code handles new bar checks if necessary for the strategy, or runs on every tick if specified.
Check for sufficient margin before opening trades."""


def format_lot_size(lot_size: float) -> str:
    """Plain decimal notation, never an exponent (0.00001, not 1e-05)."""
    return format(Decimal(repr(lot_size)), "f")


def compose_user_prompt(params: StrategyParameters) -> str:
    """Render the user prompt. Every field appears, even when empty."""
    return USER_PROMPT_TEMPLATE.format(
        symbol=params.symbol or CURRENT_SYMBOL_LABEL,
        timeframe=params.timeframe.value,
        lot_size=format_lot_size(params.lot_size),
        stop_loss_points=params.stop_loss_points,
        take_profit_points=params.take_profit_points,
        trailing_stop="Yes" if params.use_trailing_stop else "No",
        strategy_description=params.strategy_description,
    )


def compose(params: StrategyParameters) -> GenerationRequest:
    """Build the generation request for a set of strategy parameters.

    Pure and deterministic: the same parameters always produce the same
    request. An empty description still yields a well-formed prompt; refusing
    to submit it is the orchestrator's job.
    """
    return GenerationRequest(
        system_instruction=SYSTEM_INSTRUCTION,
        user_prompt=compose_user_prompt(params),
        config=GenerationConfig(),
        prompt_version=PROMPT_VERSION,
    )
