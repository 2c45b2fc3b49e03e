"""Parsing for the legacy string-encoded list format.

Older recipe rows store ingredients and steps as a single string holding a
bracketed, quote-delimited pseudo-array, e.g.::

    "['2 cups flour', \"grandma's \\\"secret\\\" sauce\"]"

This is not JSON (single quotes are allowed, items may mix quote styles), so
a small tokenizer is used instead of a general-purpose parser.
"""

from typing import Any


def parse_array_from_string(value: str) -> list[str]:
    """
    Tokenize a bracketed, quote-delimited list into its string items.

    Only quoted text becomes an item; anything between items (commas,
    whitespace, stray characters) is ignored. A backslash inside a quoted
    item escapes the next character. Input that is not wrapped in ``[`` and
    ``]`` yields an empty list, as does an unterminated trailing item.
    """
    s = value.strip()
    if not s.startswith("[") or not s.endswith("]") or len(s) < 2:
        return []

    result: list[str] = []
    current: list[str] = []
    quote: str | None = None
    escaped = False

    for ch in s[1:-1]:
        if quote is None:
            if ch in ("'", '"'):
                quote = ch
            continue

        if escaped:
            current.append(ch)
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == quote:
            result.append("".join(current))
            current = []
            quote = None
        else:
            current.append(ch)

    return result


def coerce_string_list(value: Any) -> list[str]:
    """
    Resolve a ``str | list | None`` field into a list of strings.

    Strings are treated as the legacy encoding, lists are kept (items
    stringified, ``None`` items skipped) and anything absent becomes empty.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return parse_array_from_string(value)
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return []
