"""Key pattern matching for locked and ignored key filters."""

import json
from fnmatch import fnmatchcase
from typing import Any, Iterable, List, Tuple


def matches_key_pattern(key: str, patterns: Iterable[str]) -> bool:
    """
    Check whether a key matches any pattern by prefix or glob.

    Keys are slash-delimited (``api/v1/users``). A pattern matches when it is a
    literal prefix of the key or when the key matches it as a glob, where ``*``
    also spans ``/``.

    Examples:
        matches_key_pattern("api/v2/users", ["api/*/users"])  -> True
        matches_key_pattern("settings/theme", ["settings"])   -> True
        matches_key_pattern("other/key", ["api", "settings"])  -> False
    """
    return any(
        key.startswith(pattern) or fnmatchcase(key, pattern)
        for pattern in patterns
    )


def filter_entries_by_pattern(
    entries: Iterable[Tuple[str, Any]],
    patterns: List[str]
) -> List[Tuple[str, Any]]:
    """Keep the (key, value) entries whose key matches one of the patterns."""
    return [(key, value) for key, value in entries if matches_key_pattern(key, patterns)]


def format_display_value(value: Any, max_length: int = 50) -> str:
    """
    Format a value for terminal display.

    Strings longer than ``max_length`` are truncated with ``...``; every other
    value is rendered as compact JSON (``true``, ``null``, ``[1,2,3]``).
    """
    if isinstance(value, str):
        if len(value) > max_length:
            return f"{value[:max_length]}..."
        return value
    return json.dumps(value, ensure_ascii=False, separators=(',', ':'))
