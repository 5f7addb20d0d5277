"""Widget tools - HTML widget rendering for MCP."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List


@dataclass(frozen=True)
class Widget:
    """Definition of an HTML widget."""
    identifier: str
    title: str
    template_uri: str
    invoking: str
    invoked: str
    html: str


MIME_TYPE = "text/html+skybridge"

CODE_VIEWER_URI = "ui://widget/ea-code-viewer.html"

_ASSET_CANDIDATES = [
    Path(__file__).resolve().parent.parent / "assets",
    Path.cwd() / "assets",
]


@lru_cache(maxsize=None)
def load_widget_html(filename: str) -> str:
    """Load widget HTML from disk, falling back to a tiny placeholder."""
    for base in _ASSET_CANDIDATES:
        html_path = base / filename
        if html_path.exists():
            return html_path.read_text(encoding="utf8")
    return "<html><body><p>Widget asset missing.</p></body></html>"


def get_widgets() -> List[Widget]:
    """Get all available widgets (for resources)."""
    return [
        Widget(
            identifier="ea-code-viewer",
            title="Expert Advisor Code Viewer",
            template_uri=CODE_VIEWER_URI,
            invoking="Writing code...",
            invoked="Expert Advisor ready",
            html=load_widget_html("ea-code-viewer.html"),
        ),
    ]


def resource_description(widget: Widget) -> str:
    """Generate a description for a widget resource."""
    return f"{widget.title} markup"


def tool_meta(widget: Widget) -> Dict[str, Any]:
    """Generate metadata for a widget-backed tool."""
    return {
        "openai/outputTemplate": widget.template_uri,
        "openai/toolInvocation/invoking": widget.invoking,
        "openai/toolInvocation/invoked": widget.invoked,
        "openai/widgetAccessible": True,
    }


def tool_invocation_meta(widget: Widget) -> Dict[str, Any]:
    """Generate invocation metadata for a widget tool."""
    return {
        "openai/toolInvocation/invoking": widget.invoking,
        "openai/toolInvocation/invoked": widget.invoked,
    }
