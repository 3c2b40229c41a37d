"""
Prompt execution session.

Holds the state a host needs between executions: the loaded prompt
collection, the dot prompt (the last executed prompt, runnable as `.`) and
the source chosen for the last `$select`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from qanda.prompts.collection import PromptCollection
from qanda.prompts.loader import PromptLoader
from qanda.prompts.models import DOT_PROMPT_NAME, Prompt
from qanda.prompts.parser import parse_scratch_prompt
from qanda.prompts.placeholders import ValueSource, substitute_placeholders

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedPrompt:
    """A prompt with its placeholders expanded, ready to send."""

    prompt: Prompt
    text: str


class Session:
    """Prepares prompts for execution and remembers the last one.

    Usage:
        session = Session(loader.load())
        prepared = await session.prepare("Summarize", source)
        again = await session.repeat(source)
    """

    def __init__(self, prompts: PromptCollection | None = None):
        self.prompts = prompts if prompts is not None else PromptCollection()
        self.dot_prompt: Prompt | None = None
        self.last_select_source: str | None = None

    def reload(self, loader: PromptLoader) -> PromptCollection:
        """Replace the prompt collection with a freshly loaded one."""
        self.prompts = loader.load()
        return self.prompts

    def all_prompts(self) -> PromptCollection:
        """Loaded prompts plus the dot prompt, if one was executed."""
        if self.dot_prompt is None:
            return self.prompts
        return self.prompts.with_dot_prompt(self.dot_prompt)

    def get_prompt(self, name: str) -> Prompt:
        """Look up a prompt by name; `.` is the last executed prompt.

        Raises:
            PromptNotFoundError: If no prompt has that name
        """
        return self.all_prompts().require(name)

    async def prepare(self, name: str, source: ValueSource) -> PreparedPrompt:
        """Expand the placeholders of a named prompt.

        The prompt becomes the dot prompt before substitution starts, so it
        can be repeated even if this run is cancelled. A `$select` choice is
        written into the dot prompt so a repeat reuses it.

        Raises:
            PromptNotFoundError: If no prompt has that name
            SubstitutionCancelled: If the user cancelled
            SubstitutionError: If a placeholder could not be resolved
        """
        return await self.execute(self.get_prompt(name), source)

    async def prepare_scratch(self, text: str, source: ValueSource) -> PreparedPrompt:
        """Expand ephemeral prompt content (with or without a header)."""
        return await self.execute(parse_scratch_prompt(text), source)

    async def repeat(self, source: ValueSource) -> PreparedPrompt:
        """Run the last executed prompt again."""
        return await self.prepare(DOT_PROMPT_NAME, source)

    async def execute(self, prompt: Prompt, source: ValueSource) -> PreparedPrompt:
        """Record `prompt` as the dot prompt and expand its placeholders."""
        dot_prompt = prompt.as_dot_prompt()
        self.dot_prompt = dot_prompt

        def remember_select(token: str) -> None:
            self.last_select_source = token
            self.dot_prompt = dot_prompt.as_dot_prompt(dot_prompt.prompt.replace("$select", token))

        text = await substitute_placeholders(prompt.prompt, source, on_select=remember_select)
        logger.debug(f"Prepared prompt '{prompt.name}' ({len(text)} chars)")
        return PreparedPrompt(prompt=prompt, text=text)
