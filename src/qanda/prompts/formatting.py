"""Render prompts for previews and write them back as template text."""

from __future__ import annotations

from collections.abc import Iterable

from .escapes import escape_string
from .models import Prompt

PREVIEW_RULE = "─" * 40


def _header_lines(prompt: Prompt) -> list[str]:
    # Unnamed records (names not required) have no name line to write
    lines = [f"name: {prompt.name}"] if prompt.name else []
    if prompt.model:
        lines.append(f"model: {prompt.model}")
    if prompt.extract:
        lines.append(f"extract: {escape_string(prompt.extract)}")
    if prompt.paste:
        lines.append(f"paste: {prompt.paste}")
    for key, value in prompt.model_options.items():
        lines.append(f"{key}: {value}")
    return lines


def prompt_to_lines(prompt: Prompt) -> list[str]:
    """Format a prompt as preview lines: ruled header followed by the body."""
    lines = [PREVIEW_RULE, *_header_lines(prompt), PREVIEW_RULE]
    lines.extend(prompt.prompt.strip().split("\n"))
    return lines


def format_prompts(prompts: Iterable[Prompt]) -> str:
    """Serialize prompts to the template file format.

    The output parses back into equal prompts (less their filename).
    """
    blocks = []
    for prompt in prompts:
        block = ["---", *_header_lines(prompt), "---"]
        if prompt.prompt:
            block.append(prompt.prompt)
        blocks.append("\n".join(block))
    return "\n\n".join(blocks) + "\n" if blocks else ""
