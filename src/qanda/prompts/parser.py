"""
Prompt template parser.

Parses markdown prompt files made of fence-delimited records:

    ---
    name: Summarize
    model: mistral
    temperature: 0.2
    ---
    Summarize the following $filetype code:
    $clipboard

A fence is a line that is exactly `---` or `___`; the two styles are
interchangeable. Header lines are `key: value` pairs, the body runs until the
next fence or end of input. Full-line HTML comments are ignored in both
sections. Parsing is all-or-nothing: one malformed record fails the text.
"""

from __future__ import annotations

import logging
import re
from enum import Enum

from .escapes import unescape_string
from .models import DOT_PROMPT_NAME, PASTE_MODES, RESERVED_KEYS, Prompt

logger = logging.getLogger(__name__)

FENCES = ("---", "___")

HTML_COMMENT_PATTERN = re.compile(r"<!--.*-->")
HEADER_PATTERN = re.compile(r"([^:]+):\s*(.+)")


class ParseErrorKind(str, Enum):
    """Reasons a prompt text fails to parse."""

    MALFORMED_HEADER = "malformed_header"
    MISSING_NAME = "missing_name"
    MISSING_CLOSING_FENCE = "missing_closing_fence"
    INVALID_PASTE_VALUE = "invalid_paste_value"
    INVALID_EXTRACT_PATTERN = "invalid_extract_pattern"


_MESSAGES = {
    ParseErrorKind.MALFORMED_HEADER: "Malformed header option format",
    ParseErrorKind.MISSING_NAME: "Missing name in header",
    ParseErrorKind.MISSING_CLOSING_FENCE: "Missing closing header line after header",
    ParseErrorKind.INVALID_PASTE_VALUE: "Invalid paste value",
    ParseErrorKind.INVALID_EXTRACT_PATTERN: "Invalid regex in extract option",
}


class PromptParseError(Exception):
    """A prompt text could not be parsed.

    Attributes:
        kind: What went wrong
        line: 1-based line number the error refers to
        detail: Offending text (header line, value or pattern)
    """

    def __init__(self, kind: ParseErrorKind, line: int, detail: str = ""):
        self.kind = kind
        self.line = line
        self.detail = detail
        message = f"{_MESSAGES[kind]} at line {line}"
        super().__init__(f"{message}: {detail}" if detail else message)


def is_fence(line: str) -> bool:
    """Check whether a line delimits a header block."""
    return line in FENCES


def is_html_comment(line: str) -> bool:
    """Check whether a (trimmed) line is a single HTML comment."""
    return HTML_COMMENT_PATTERN.fullmatch(line.strip()) is not None


def _trim_blank_lines(lines: list[str]) -> list[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def _parse_header_line(text: str, line_no: int, fields: dict[str, str], options: dict[str, str]) -> None:
    """Parse one trimmed header line into the record's fields or options."""
    match = HEADER_PATTERN.fullmatch(text)
    key = match.group(1).strip() if match else ""
    if not match or not key:
        raise PromptParseError(ParseErrorKind.MALFORMED_HEADER, line_no, text)

    value = match.group(2).strip()

    if key not in RESERVED_KEYS:
        options[key] = value
        return

    if key == "paste" and value not in PASTE_MODES:
        raise PromptParseError(ParseErrorKind.INVALID_PASTE_VALUE, line_no, value)

    if key == "extract":
        value = unescape_string(value)
        try:
            re.compile(value)
        except re.error as e:
            raise PromptParseError(ParseErrorKind.INVALID_EXTRACT_PATTERN, line_no, value) from e

    fields[key] = value


def parse_prompts(text: str, require_names: bool = True) -> list[Prompt]:
    """Parse prompt template text into prompts, in file order.

    Args:
        text: Full content of a prompts file
        require_names: Fail records without a `name` header

    Returns:
        List of Prompt records (without filename)

    Raises:
        PromptParseError: If any record is malformed
    """
    lines = text.replace("\r\n", "\n").split("\n")
    result: list[Prompt] = []
    i = 0

    while i < len(lines):
        if not is_fence(lines[i]):
            i += 1
            continue

        header_start = i + 1
        fields: dict[str, str] = {}
        options: dict[str, str] = {}
        i += 1

        while i < len(lines) and not is_fence(lines[i]):
            header_line = lines[i].strip()
            if header_line and not is_html_comment(header_line):
                _parse_header_line(header_line, i + 1, fields, options)
            i += 1

        if i >= len(lines):
            raise PromptParseError(ParseErrorKind.MISSING_CLOSING_FENCE, header_start)

        # Skip the closing fence
        i += 1

        body_lines: list[str] = []
        while i < len(lines) and not is_fence(lines[i]):
            if not is_html_comment(lines[i]):
                body_lines.append(lines[i])
            i += 1

        if require_names and not fields.get("name"):
            raise PromptParseError(ParseErrorKind.MISSING_NAME, header_start)

        result.append(
            Prompt(
                name=fields.get("name", ""),
                prompt="\n".join(_trim_blank_lines(body_lines)),
                model=fields.get("model"),
                extract=fields.get("extract"),
                paste=fields.get("paste"),  # type: ignore[arg-type]
                model_options=options,
            )
        )

    logger.debug(f"Parsed {len(result)} prompt(s)")
    return result


def parse_scratch_prompt(text: str) -> Prompt:
    """Parse ephemeral prompt content into a single dot prompt.

    Content that does not start with a fence is treated as a bare body.

    Args:
        text: Scratch prompt content, with or without a header

    Returns:
        Prompt named `.` without filename

    Raises:
        ValueError: If the content is blank or holds more than one record
        PromptParseError: If the header is malformed
    """
    if not text.strip():
        raise ValueError("Scratch prompt is empty")

    first_line = text.replace("\r\n", "\n").split("\n", 1)[0]
    if not is_fence(first_line):
        text = f"___\nname: {DOT_PROMPT_NAME}\n___\n{text}"

    prompts = parse_prompts(text, require_names=False)
    if len(prompts) != 1:
        raise ValueError(f"Scratch prompt must hold exactly one template, found {len(prompts)}")

    return prompts[0].as_dot_prompt()
