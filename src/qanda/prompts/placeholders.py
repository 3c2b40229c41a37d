"""
Placeholder substitution for prompt bodies.

Placeholders are expanded in a fixed order, each step working on the output
of the previous one:

1. `$select`            - ask which source to use, becomes `$clipboard`,
                          `$yanked` or `$input`
2. `${input:<label>}`   - free text, prompted with `<label>: `
3. `$input`             - free text, prompted once with `Input: `
4. `$clipboard`, `$yanked` - aliases for `$register_+` and `$register_0`
5. `$register_<c>`      - register contents
6. `$filetype`          - filetype of the current buffer

A `$` inside a substituted value is swapped for a sentinel character until the
last step, so user input and register contents are never expanded again.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)

# Private-use code point standing in for `$` inside substituted values until
# the final restore
SENTINEL = "\ue000"

SELECT_PROMPT = "Select input source:"
SELECT_CHOICES = (
    ("1. Clipboard", "$clipboard"),
    ("2. Yanked text", "$yanked"),
    ("3. User input", "$input"),
)
INPUT_PROMPT = "Input: "

LABELED_INPUT_PATTERN = re.compile(r"\$\{input:(.*?)\}")
REGISTER_PATTERN = re.compile(r'\$register_([A-Za-z0-9*+:"])')

REGISTER_ALIASES = {
    "$clipboard": "$register_+",
    "$yanked": "$register_0",
}

REGISTER_NAMES = {
    "+": "Clipboard",
    "0": "Yanked text",
}


class ValueSource(Protocol):
    """Supplies placeholder values; all user interaction goes through here.

    Each method is awaited exactly once per request.
    """

    async def input(self, prompt: str) -> str:
        """Ask for free text. An empty answer cancels the substitution."""
        ...

    async def select(self, prompt: str, options: list[str]) -> int | None:
        """Ask for one of `options`. Returns its index, or None to cancel."""
        ...

    async def register(self, name: str) -> str | None:
        """Return the contents of a register (`+` is the clipboard)."""
        ...

    async def filetype(self) -> str:
        """Return the filetype of the current buffer."""
        ...


class SubstitutionAborted(Exception):
    """Substitution stopped without producing a result."""


class SubstitutionCancelled(SubstitutionAborted):
    """The user cancelled an interactive step."""

    def __init__(self, message: str = "Cancelled"):
        super().__init__(message)


class SubstitutionErrorKind(str, Enum):
    """Reasons substitution fails."""

    EMPTY_REGISTER = "empty_register"


class SubstitutionError(SubstitutionAborted):
    """A placeholder could not be resolved."""

    def __init__(self, kind: SubstitutionErrorKind, message: str, register_name: str | None = None):
        self.kind = kind
        self.register_name = register_name
        super().__init__(message)


def describe_register(name: str) -> str:
    """User-facing name of a register."""
    return REGISTER_NAMES.get(name, f"Register '{name}'")


def protect(value: str) -> str:
    """Hide `$` in a substituted value from later placeholder steps."""
    return value.replace("$", SENTINEL)


def restore(text: str) -> str:
    """Turn protected `$` characters back into literal ones."""
    return text.replace(SENTINEL, "$")


async def _substitute_select(
    text: str,
    source: ValueSource,
    on_select: Callable[[str], None] | None,
) -> str:
    if "$select" not in text:
        return text

    labels = [label for label, _ in SELECT_CHOICES]
    index = await source.select(SELECT_PROMPT, labels)
    if index is None or not 0 <= index < len(SELECT_CHOICES):
        raise SubstitutionCancelled()

    token = SELECT_CHOICES[index][1]
    logger.debug(f"$select resolved to {token}")
    if on_select is not None:
        on_select(token)
    return text.replace("$select", token)


async def _substitute_labeled_inputs(text: str, source: ValueSource) -> str:
    parts: list[str] = []
    position = 0
    for match in LABELED_INPUT_PATTERN.finditer(text):
        answer = await source.input(f"{match.group(1)}: ")
        if not answer:
            raise SubstitutionCancelled()
        parts.append(text[position : match.start()])
        parts.append(protect(answer))
        position = match.end()
    parts.append(text[position:])
    return "".join(parts)


async def _substitute_input(text: str, source: ValueSource) -> str:
    if "$input" not in text:
        return text

    answer = await source.input(INPUT_PROMPT)
    if not answer:
        raise SubstitutionCancelled()
    return text.replace("$input", protect(answer))


def _substitute_aliases(text: str) -> str:
    for alias, target in REGISTER_ALIASES.items():
        text = text.replace(alias, target)
    return text


async def _substitute_registers(text: str, source: ValueSource) -> str:
    values: dict[str, str] = {}
    for match in REGISTER_PATTERN.finditer(text):
        name = match.group(1)
        if name in values:
            continue
        value = await source.register(name)
        if not value or not value.strip():
            raise SubstitutionError(
                SubstitutionErrorKind.EMPTY_REGISTER,
                f"{describe_register(name)} is empty",
                register_name=name,
            )
        values[name] = protect(value)

    return REGISTER_PATTERN.sub(lambda m: values[m.group(1)], text)


async def _substitute_filetype(text: str, source: ValueSource) -> str:
    if "$filetype" not in text:
        return text
    return text.replace("$filetype", protect(await source.filetype()))


async def substitute_placeholders(
    body: str,
    source: ValueSource,
    on_select: Callable[[str], None] | None = None,
) -> str:
    """Expand the placeholders in a prompt body.

    Args:
        body: Prompt body containing placeholders
        source: Supplies user input, choices, registers and filetype
        on_select: Called with the token chosen for `$select`
            (`$clipboard`, `$yanked` or `$input`)

    Returns:
        The fully expanded text

    Raises:
        SubstitutionCancelled: If the user cancelled an interactive step
        SubstitutionError: If a register is empty
    """
    text = await _substitute_select(body, source, on_select)
    text = await _substitute_labeled_inputs(text, source)
    text = await _substitute_input(text, source)
    text = _substitute_aliases(text)
    text = await _substitute_registers(text, source)
    text = await _substitute_filetype(text, source)
    return restore(text)
