"""Expert Advisor generator MCP server built with the FastMCP helper.

The server exposes a code-viewer widget as a resource and two tools: one that
turns a strategy description into MQL5 Expert Advisor code, and one that lists
the starter strategy templates. The generate tool returns the normalized code,
its highlighted markup and a download payload as structured content so MCP
clients can hydrate the widget.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, cast

from dotenv import load_dotenv
import mcp.types as types
from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError
from pydantic.networks import AnyUrl

from ea_wizard import (
    CODE_VIEWER_URI,
    GENERATE_TOOL_NAME,
    GENERATE_TOOL_SCHEMA,
    MIME_TYPE,
    TEMPLATES_TOOL_NAME,
    TEMPLATES_TOOL_SCHEMA,
    GenerateInput,
    SubmissionRejected,
    Widget,
    format_result_text,
    get_generation_client,
    get_widgets,
    list_templates,
    resource_description,
    run_generation,
    tool_invocation_meta,
    tool_meta,
)


# Load environment variables from a local .env when present.
load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env", override=False)

logger = logging.getLogger(__name__)


# Initialize widgets
widgets: List[Widget] = get_widgets()
WIDGETS_BY_URI: Dict[str, Widget] = {widget.template_uri: widget for widget in widgets}
CODE_VIEWER: Widget = WIDGETS_BY_URI[CODE_VIEWER_URI]

# The API key is read on each call, so a missing key surfaces as a tool result.
generation_client = get_generation_client()


mcp = FastMCP(name="ea-wizard-mcp", stateless_http=True)


def _error_result(text: str) -> types.ServerResult:
    return types.ServerResult(
        types.CallToolResult(
            content=[types.TextContent(type="text", text=text)],
            isError=True,
        )
    )


@mcp._mcp_server.list_tools()
async def _list_tools() -> List[types.Tool]:
    return [
        types.Tool(
            name=GENERATE_TOOL_NAME,
            title="Generate MQL5 Expert Advisor",
            description="Generate MQL5 Expert Advisor source code from a trading strategy description and risk settings.",
            inputSchema=deepcopy(GENERATE_TOOL_SCHEMA),
            _meta={
                **tool_meta(CODE_VIEWER),
                "openai/resultCanProduceWidget": True,
            },
            annotations=types.ToolAnnotations(
                destructiveHint=False,
                openWorldHint=True,
                readOnlyHint=True,
            ),
        ),
        types.Tool(
            name=TEMPLATES_TOOL_NAME,
            title="List Strategy Templates",
            description="List starter strategy descriptions (CRT/TJR, RSI reversal, MA crossover).",
            inputSchema=deepcopy(TEMPLATES_TOOL_SCHEMA),
            annotations=types.ToolAnnotations(
                destructiveHint=False,
                openWorldHint=False,
                readOnlyHint=True,
            ),
        ),
    ]


@mcp._mcp_server.list_resources()
async def _list_resources() -> List[types.Resource]:
    return [
        types.Resource(
            name=widget.title,
            title=widget.title,
            uri=cast(AnyUrl, widget.template_uri),
            description=resource_description(widget),
            mimeType=MIME_TYPE,
            _meta=tool_meta(widget),
        )
        for widget in widgets
    ]


@mcp._mcp_server.list_resource_templates()
async def _list_resource_templates() -> List[types.ResourceTemplate]:
    return [
        types.ResourceTemplate(
            name=widget.title,
            title=widget.title,
            uriTemplate=widget.template_uri,
            description=resource_description(widget),
            mimeType=MIME_TYPE,
            _meta=tool_meta(widget),
        )
        for widget in widgets
    ]


async def _handle_read_resource(req: types.ReadResourceRequest) -> types.ServerResult:
    widget = WIDGETS_BY_URI.get(str(req.params.uri))
    if widget is None:
        return types.ServerResult(
            types.ReadResourceResult(
                contents=[],
                _meta={"error": f"Unknown resource: {req.params.uri}"},
            )
        )

    contents: List[types.TextResourceContents | types.BlobResourceContents] = [
        types.TextResourceContents(
            uri=cast(AnyUrl, widget.template_uri),
            mimeType=MIME_TYPE,
            text=widget.html,
            _meta=tool_meta(widget),
        )
    ]
    return types.ServerResult(types.ReadResourceResult(contents=contents))


async def _call_tool_request(req: types.CallToolRequest) -> types.ServerResult:
    if req.params.name == GENERATE_TOOL_NAME:
        arguments = req.params.arguments or {}
        try:
            payload = GenerateInput.model_validate(arguments)
        except ValidationError as exc:
            return _error_result(f"Input validation error: {exc.errors()}")

        try:
            snapshot, result = await run_generation(payload, generation_client)
        except (SubmissionRejected, ValueError) as exc:
            return _error_result(f"Cannot generate Expert Advisor: {exc}")

        return types.ServerResult(
            types.CallToolResult(
                content=[types.TextContent(type="text", text=format_result_text(snapshot))],
                structuredContent=result,
                isError=snapshot.error is not None,
                _meta={
                    "openai/outputTemplate": CODE_VIEWER.template_uri,
                    **tool_invocation_meta(CODE_VIEWER),
                },
            )
        )

    if req.params.name == TEMPLATES_TOOL_NAME:
        templates = [template.model_dump() for template in list_templates()]
        text = ", ".join(f"{t['key']} ({t['label']})" for t in templates)
        return types.ServerResult(
            types.CallToolResult(
                content=[types.TextContent(type="text", text=f"Available templates: {text}")],
                structuredContent={"templates": templates},
            )
        )

    return _error_result(f"Unknown tool: {req.params.name}")


mcp._mcp_server.request_handlers[types.CallToolRequest] = _call_tool_request
mcp._mcp_server.request_handlers[types.ReadResourceRequest] = _handle_read_resource


app = mcp.streamable_http_app()

try:
    from starlette.middleware.cors import CORSMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=False,
    )
except ImportError:
    logger.warning("starlette not available; CORS middleware disabled")


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s: %(message)s")
    uvicorn.run("main:app", host="0.0.0.0", port=8090)
