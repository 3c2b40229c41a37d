"""Backslash escapes for header values.

The same map is used in both directions so that stored values containing
control characters (notably `extract` patterns) survive a write/parse cycle.
"""

import re

_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\\": "\\\\",
    '"': '\\"',
    "'": "\\'",
}

_UNESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

_ESCAPE_PATTERN = re.compile(r"[\n\r\t\\\"']")
_UNESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)


def escape_string(s: str) -> str:
    """Escape newlines, carriage returns, tabs, backslashes and quotes."""
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES[m.group(0)], s)


def unescape_string(s: str) -> str:
    """Translate backslash sequences back to the characters they stand for.

    Unknown sequences are kept verbatim, so regular expression classes such
    as `\\d` or `\\s` need no doubling. A trailing lone backslash is kept.
    """
    return _UNESCAPE_PATTERN.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(0)), s)
