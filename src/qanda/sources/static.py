"""Scripted value source for non-interactive runs and tests."""

from __future__ import annotations

from collections.abc import Iterable, Mapping


class StaticValueSource:
    """Answers substitution requests from pre-recorded values.

    Free-text answers are handed out in order; once they run out every
    further request gets an empty answer, which cancels the substitution.

    Example:
        source = StaticValueSource(answers=["Paris"], registers={"+": "text"})
        text = await substitute_placeholders(body, source)
    """

    def __init__(
        self,
        answers: Iterable[str] = (),
        choice: int | None = None,
        registers: Mapping[str, str] | None = None,
        filetype: str = "",
    ):
        """Initialize the source.

        Args:
            answers: Free-text answers, consumed in order
            choice: Index returned for every selection, None cancels
            registers: Register contents by register name
            filetype: Filetype reported for `$filetype`
        """
        self._answers = list(answers)
        self.choice = choice
        self.registers = dict(registers or {})
        self._filetype = filetype
        self.prompts: list[str] = []

    async def input(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._answers:
            return ""
        return self._answers.pop(0)

    async def select(self, prompt: str, options: list[str]) -> int | None:
        self.prompts.append(prompt)
        return self.choice

    async def register(self, name: str) -> str | None:
        return self.registers.get(name)

    async def filetype(self) -> str:
        return self._filetype
