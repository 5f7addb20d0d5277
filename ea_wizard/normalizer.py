"""Code Normalizer - strips Markdown fence artifacts from model output."""

from __future__ import annotations

import re


# A whole line holding only a fence, optionally followed by a language tag
# such as ```mql5, ```c or ```cpp. Inline backticks never match.
FENCE_LINE_PATTERN = re.compile(r"^[ \t]*```[ \t]*[\w+#.-]*[ \t]*$")


def is_fence_line(line: str) -> bool:
    """True if the line, without its line ending, is only a fence marker."""
    return bool(FENCE_LINE_PATTERN.match(line.rstrip("\r\n")))


def normalize(raw_text: str) -> str:
    """Remove fence lines from generated text.

    Text without fence lines is returned unchanged. When fences are removed,
    the blank lines left at the start and end are trimmed as well. The code
    itself is never reformatted.
    """
    lines = raw_text.splitlines(keepends=True)
    kept = [line for line in lines if not is_fence_line(line)]
    if len(kept) == len(lines):
        return raw_text

    while kept and not kept[0].strip():
        kept.pop(0)
    while kept and not kept[-1].strip():
        kept.pop()
    return "".join(kept).rstrip("\r\n")
