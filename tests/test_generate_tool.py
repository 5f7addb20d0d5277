import asyncio

import pytest
from pydantic import ValidationError

from conftest import GatedGenerator, StubGenerator
from ea_wizard import (
    DOWNLOAD_FILENAME,
    NO_CODE_PLACEHOLDER,
    GenerateInput,
    GenerationState,
    GenerationSuccess,
    SubmissionRejected,
    Timeframe,
    format_result_text,
    get_template,
    run_generation,
    strip_tags,
)


def test_input_maps_to_strategy_parameters():
    payload = GenerateInput.model_validate({
        "strategy_description": "Buy the dip",
        "symbol": " XAUUSD ",
        "timeframe": "M15",
        "lot_size": 0.5,
        "use_trailing_stop": True,
    })
    params = payload.to_parameters()
    assert params.symbol == "XAUUSD"
    assert params.timeframe == Timeframe.M15
    assert params.lot_size == 0.5
    assert params.stop_loss_points == 100
    assert params.use_trailing_stop is True


def test_template_fills_empty_description():
    params = GenerateInput(template="rsi").to_parameters()
    assert params.strategy_description == get_template("rsi").content


def test_explicit_description_wins_over_template():
    params = GenerateInput(strategy_description="Sell Fridays", template="ma").to_parameters()
    assert params.strategy_description == "Sell Fridays"


@pytest.mark.parametrize("arguments", [
    {"lot_size": 0},
    {"lot_size": float("inf")},
    {"stop_loss_points": -1},
    {"timeframe": "H2"},
    {"unexpected": True},
])
def test_invalid_arguments_are_rejected(arguments):
    with pytest.raises(ValidationError):
        GenerateInput.model_validate({"strategy_description": "x", **arguments})


@pytest.mark.asyncio
async def test_run_generation_returns_code_markup_and_download():
    generator = StubGenerator(GenerationSuccess(text='```mql5\nvoid OnTick(){ Print("hi"); }\n```'))
    payload = GenerateInput(strategy_description="Print on every tick", symbol="EURUSD")

    snapshot, content = await run_generation(payload, generator)

    assert snapshot.state == GenerationState.SUCCEEDED
    assert content["state"] == "succeeded"
    assert content["code"] == 'void OnTick(){ Print("hi"); }'
    assert strip_tags(content["highlighted"]) == content["code"]
    assert content["download"] == {
        "filename": DOWNLOAD_FILENAME,
        "mimeType": "text/plain",
        "code": content["code"],
    }
    assert "Expert Advisor generated" in format_result_text(snapshot)


@pytest.mark.asyncio
async def test_run_generation_failure_has_no_code(generation_failure):
    snapshot, content = await run_generation(
        GenerateInput(strategy_description="anything"),
        StubGenerator(generation_failure),
    )
    assert content["state"] == "failed"
    assert content["code"] is None
    assert "highlighted" not in content
    assert content["errorType"] == "generation_error"
    assert format_result_text(snapshot).startswith("Generation Failed")


@pytest.mark.asyncio
async def test_run_generation_rejects_empty_description():
    generator = StubGenerator()
    with pytest.raises(SubmissionRejected):
        await run_generation(GenerateInput(template="custom"), generator)
    assert generator.requests == []


@pytest.mark.asyncio
async def test_unknown_template_is_a_value_error():
    with pytest.raises(ValueError):
        await run_generation(GenerateInput(template="martingale"), StubGenerator())


@pytest.mark.asyncio
async def test_fence_only_reply_offers_placeholder_not_empty_file():
    snapshot, content = await run_generation(
        GenerateInput(strategy_description="x"),
        StubGenerator(GenerationSuccess(text="```mql5\n```")),
    )
    assert content["degenerate"] is True
    assert content["download"]["code"] == NO_CODE_PLACEHOLDER
    assert format_result_text(snapshot).startswith("The model returned no code")


@pytest.mark.asyncio
async def test_concurrent_calls_keep_their_own_results():
    generator = GatedGenerator(first=GenerationSuccess(text="int first;"), later=GenerationSuccess(text="int second;"))

    pending = asyncio.create_task(run_generation(GenerateInput(strategy_description="a"), generator))
    await asyncio.sleep(0)
    second, _ = await run_generation(GenerateInput(strategy_description="b"), generator)
    generator.release()
    first, _ = await pending

    assert second.code == "int second;"
    assert first.code == "int first;"
    assert first.sequence == second.sequence == 1
