"""Lexical Highlighter - best-effort MQL5 decoration for display.

The markup produced here is only ever rendered. The normalized code is what
gets copied and downloaded.

Tagging runs in a fixed order: string literals, then comments, then language
keywords, then platform identifiers. A region claimed by an earlier category
is never re-tagged, so `"return"` inside quotes or `// if` inside a comment
stays a string or a comment. A word present in both keyword lists is tagged as
a language keyword.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple


class TokenCategory(str, Enum):
    STRING = "string"
    COMMENT = "comment"
    KEYWORD = "keyword"
    API = "api"


CSS_CLASSES = {
    TokenCategory.STRING: "hl-string",
    TokenCategory.COMMENT: "hl-comment",
    TokenCategory.KEYWORD: "hl-keyword",
    TokenCategory.API: "hl-api",
}

LANGUAGE_KEYWORDS = frozenset({
    "void", "int", "uint", "long", "ulong", "short", "ushort", "char", "uchar",
    "double", "float", "bool", "string", "datetime", "color",
    "class", "struct", "enum", "public", "private", "protected",
    "virtual", "override", "static", "const", "new", "delete", "this",
    "return", "if", "else", "for", "while", "do", "break", "continue",
    "switch", "case", "default", "true", "false", "input", "sinput",
})

# Lifecycle handlers, order management and I/O helpers of the trading platform.
PLATFORM_IDENTIFIERS = frozenset({
    "OnInit", "OnDeinit", "OnTick", "OnTimer", "OnTrade", "OnTradeTransaction",
    "OnChartEvent",
    "CTrade", "CPositionInfo", "CSymbolInfo", "COrderInfo",
    "MqlTradeRequest", "MqlTradeResult", "MqlTick", "MqlRates",
    "OrderSend", "OrderCalcMargin", "PositionSelect", "PositionSelectByTicket",
    "PositionGetDouble", "PositionGetInteger", "PositionGetString",
    "PositionGetTicket", "PositionsTotal",
    "SymbolInfoDouble", "SymbolInfoInteger", "SymbolInfoTick",
    "AccountInfoDouble", "AccountInfoInteger",
    "iMA", "iRSI", "iATR", "iMACD", "iBands", "CopyBuffer", "CopyRates",
    "IndicatorRelease", "GetLastError",
    "Print", "PrintFormat", "Alert", "Comment",
}) - LANGUAGE_KEYWORDS


def _word_alternation(words: frozenset) -> str:
    # Longest first so shared prefixes never cut a match short.
    ordered = sorted(words, key=lambda w: (-len(w), w))
    return r"\b(?:" + "|".join(re.escape(w) for w in ordered) + r")\b"


TOKEN_PATTERN = re.compile(
    r'(?P<string>"(?:[^"\\\n]|\\.)*"|\'(?:[^\'\\\n]|\\.)*\')'
    r"|(?P<comment>//[^\n]*|/\*.*?\*/)"
    rf"|(?P<keyword>{_word_alternation(LANGUAGE_KEYWORDS)})"
    rf"|(?P<api>{_word_alternation(PLATFORM_IDENTIFIERS)})",
    re.DOTALL,
)

_TAG_PATTERN = re.compile(r"<[^>]+>")


@dataclass(frozen=True)
class Token:
    """A run of source text and the category it was tagged with, if any."""
    text: str
    category: Optional[TokenCategory] = None


def _scan(text: str) -> Iterator[Tuple[Optional[TokenCategory], str]]:
    position = 0
    for match in TOKEN_PATTERN.finditer(text):
        if match.start() > position:
            yield None, text[position:match.start()]
        yield TokenCategory(match.lastgroup), match.group()
        position = match.end()
    if position < len(text):
        yield None, text[position:]


def tokenize(code: str) -> List[Token]:
    """Split code into plain and tagged runs. Joining the runs gives `code`."""
    return [Token(text=segment, category=category) for category, segment in _scan(code)]


def escape_markup(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def unescape_markup(text: str) -> str:
    return text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")


def highlight(code: str) -> str:
    """Return HTML for displaying `code` with category spans.

    The text is escaped before tagging, so angle brackets and ampersands in the
    source can never be mistaken for markup.
    """
    parts = []
    for category, segment in _scan(escape_markup(code)):
        if category is None:
            parts.append(segment)
        else:
            parts.append(f'<span class="{CSS_CLASSES[category]}">{segment}</span>')
    return "".join(parts)


def strip_tags(markup: str) -> str:
    """Inverse of `highlight`: drop the spans and unescape the text."""
    return unescape_markup(_TAG_PATTERN.sub("", markup))
