"""Ordered list parsing for table columns.

Values, expressions and replaced forms of a table variable are split into
entries by trying a chain of parser strategies in order. Each strategy
returns a list or None; the first list wins. The final strategy wraps the
whole text as a single entry and always succeeds.
"""

import ast
import json
import logging
from collections.abc import Callable

log = logging.getLogger(__name__)

ListParser = Callable[[str], list | None]

_PAIRS = {"[": "]", "(": ")"}
_OPEN = "([{"
_CLOSE = ")]}"


def parse_json_list(text: str) -> list | None:
    """Strict JSON array."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    return data if isinstance(data, list) else None


def parse_literal_list(text: str) -> list | None:
    """Python list or tuple literal, e.g. ``['a', 1.5, None]``."""
    try:
        data = ast.literal_eval(text.strip())
    except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError):
        return None
    if isinstance(data, (list, tuple)):
        return list(data)
    return None


def _unquote(item: str) -> str:
    if len(item) >= 2 and item[0] == item[-1] and item[0] in "'\"":
        return item[1:-1]
    return item


def split_top_level(body: str, sep: str = ",") -> list[str]:
    """Split text at separators outside brackets and quotes."""
    items: list[str] = []
    depth = 0
    quote = ""
    start = 0
    i = 0
    while i < len(body):
        ch = body[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = ""
        elif ch in "'\"":
            quote = ch
        elif ch in _OPEN:
            depth += 1
        elif ch in _CLOSE:
            depth = max(depth - 1, 0)
        elif ch == sep and depth == 0:
            items.append(body[start:i])
            start = i + 1
        i += 1
    items.append(body[start:])
    return items


def parse_loose_list(text: str) -> list | None:
    """Bracketed list-like text with arbitrary entries, e.g. ``[a*2, f(b, c)]``.

    Entries are split at top-level commas and stripped; a single pair of
    surrounding quotes is removed from each entry.
    """
    stripped = text.strip()
    if len(stripped) < 2 or _PAIRS.get(stripped[0]) != stripped[-1]:
        return None
    body = stripped[1:-1]
    if not body.strip():
        return []
    items = [_unquote(item.strip()) for item in split_top_level(body)]
    # A trailing comma leaves one empty tail item
    if items and not items[-1]:
        items.pop()
    return items


def wrap_singleton(text: str) -> list:
    """Terminal strategy: the whole text as one entry."""
    return [text]


LIST_PARSERS: tuple[tuple[str, ListParser], ...] = (
    ("json", parse_json_list),
    ("literal", parse_literal_list),
    ("loose", parse_loose_list),
)


def parse_list(text: str | None) -> list:
    """Parse text into an ordered list of entries, never raising.

    None parses to an empty list.
    """
    if text is None:
        return []
    for name, parser in LIST_PARSERS:
        result = parser(text)
        if result is not None:
            log.debug("Parsed list with %s strategy (%d entries)", name, len(result))
            return result
    return wrap_singleton(text)
