"""Starter strategy descriptions offered by the entry form."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class StrategyTemplate(BaseModel):
    """A named, ready-to-edit strategy description."""

    key: str = Field(..., description="Stable identifier, e.g. 'rsi'")
    label: str = Field(..., description="Display name")
    content: str = Field(default="", description="Strategy description text")

    model_config = ConfigDict(extra="forbid", frozen=True)


STRATEGY_TEMPLATES: List[StrategyTemplate] = [
    StrategyTemplate(
        key="custom",
        label="Custom Strategy",
        content="",
    ),
    StrategyTemplate(
        key="crt",
        label="CRT / TJR Liquidity Model",
        content=(
            "Implement a Candle Range Theory (CRT) strategy inspired by TJR principles.\n\n"
            "1. Time Window: Define a Reference Range (e.g., 02:00 - 05:00 Server Time).\n"
            "2. Range Identification: Mark the High and Low of this time window.\n"
            "3. Liquidity Sweep: Wait for price to sweep (break and close back inside) either the Range High or Low.\n"
            "4. Market Structure Shift (MSS): After a sweep, look for a displacement candle creating a "
            "Fair Value Gap (FVG) in the opposite direction.\n"
            "5. Entry: Place a Limit Order at the FVG or enter on Market if the FVG is retested.\n"
            "6. Stop Loss: Just beyond the swing point that swept the liquidity.\n"
            "7. Take Profit: The opposing side of the Reference Range "
            "(e.g., if Shorting from High sweep, target Range Low)."
        ),
    ),
    StrategyTemplate(
        key="rsi",
        label="RSI Reversal",
        content=(
            "Buy when RSI(14) crosses above 30 (Oversold exit).\n"
            "Sell when RSI(14) crosses below 70 (Overbought exit).\n"
            "Close existing positions on opposite signal."
        ),
    ),
    StrategyTemplate(
        key="ma",
        label="MA Crossover Trend",
        content=(
            "Fast MA (Period 10) crosses above Slow MA (Period 20) -> Buy.\n"
            "Fast MA crosses below Slow MA -> Sell.\n"
            "Only take trades during London and NY sessions (08:00 - 17:00)."
        ),
    ),
]

TEMPLATES_BY_KEY: Dict[str, StrategyTemplate] = {t.key: t for t in STRATEGY_TEMPLATES}


def list_templates() -> List[StrategyTemplate]:
    return list(STRATEGY_TEMPLATES)


def get_template(key: str) -> StrategyTemplate:
    """Get a template by key."""
    if key not in TEMPLATES_BY_KEY:
        raise ValueError(f"Unknown template: {key}. Available: {list(TEMPLATES_BY_KEY.keys())}")
    return TEMPLATES_BY_KEY[key]
