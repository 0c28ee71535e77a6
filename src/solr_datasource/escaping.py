"""Value escaping for the Solr standard query parser."""

from __future__ import annotations

import re
from typing import Any

_RESERVED_KEYWORDS = re.compile(r"\b(AND|NOT|OR)\b", re.ASCII)
_SPECIAL_CHARS = re.compile(r'([\\/+\-&|!(){}\[\]^"~*?:])')
# Phrase quotes and wildcards stay usable when native syntax is exposed.
_SPECIAL_CHARS_SOLR_SYNTAX = re.compile(r"([\\/+\-&|!(){}\[\]^~?:])")


def escape_special_chars(value: str) -> str:
    """Lower-case reserved keywords and backslash-escape special characters."""
    value = _RESERVED_KEYWORDS.sub(lambda m: m.group(0).lower(), value)
    return _SPECIAL_CHARS.sub(r"\\\1", value)


def escape_special_chars_solr_syntax(value: str) -> str:
    """Escape special characters except ``"`` and ``*``; keywords untouched."""
    return _SPECIAL_CHARS_SOLR_SYNTAX.sub(r"\\\1", value)


def escape_value(value: Any, expose_solr_syntax: bool = False) -> Any:
    """Escape strings and convert booleans to ``0``/``1``.

    Any other type is returned unchanged.
    """
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, str):
        if expose_solr_syntax:
            return escape_special_chars_solr_syntax(value)
        return escape_special_chars(value)
    return value
