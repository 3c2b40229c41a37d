"""Immutable, ordered snapshot of loaded prompts."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum

from .models import DOT_PROMPT_NAME, Prompt


class MergePolicy(str, Enum):
    """How prompts with an existing name are added to a collection."""

    ACCUMULATE = "accumulate"  # keep both, lookups return the first
    REPLACE = "replace"  # overwrite the first prompt with that name in place


class PromptNotFoundError(KeyError):
    """No prompt with the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"No prompt named '{self.name}'"


def _insert_replace(prompts: list[Prompt], prompt: Prompt) -> None:
    for i, existing in enumerate(prompts):
        if existing.name == prompt.name:
            prompts[i] = prompt
            return
    prompts.append(prompt)


class PromptCollection:
    """Ordered prompts with lookup by name.

    Collections are never mutated once built: merge operations return a new
    collection, so readers can hold on to a snapshot while a reload runs.
    """

    def __init__(self, prompts: Iterable[Prompt] = ()):
        self._prompts: tuple[Prompt, ...] = tuple(prompts)

    def __iter__(self) -> Iterator[Prompt]:
        return iter(self._prompts)

    def __len__(self) -> int:
        return len(self._prompts)

    def __contains__(self, name: object) -> bool:
        return self.get(name) is not None if isinstance(name, str) else False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PromptCollection):
            return NotImplemented
        return self._prompts == other._prompts

    def __repr__(self) -> str:
        return f"PromptCollection({len(self._prompts)} prompts)"

    def get(self, name: str) -> Prompt | None:
        """Return the first prompt with the given name, in file order."""
        for prompt in self._prompts:
            if prompt.name == name:
                return prompt
        return None

    def require(self, name: str) -> Prompt:
        """Return the first prompt with the given name.

        Raises:
            PromptNotFoundError: If no prompt has that name
        """
        prompt = self.get(name)
        if prompt is None:
            raise PromptNotFoundError(name)
        return prompt

    def names(self) -> list[str]:
        """Sorted, de-duplicated prompt names."""
        return sorted({p.name for p in self._prompts})

    def merge(
        self,
        prompts: Iterable[Prompt],
        policy: MergePolicy = MergePolicy.ACCUMULATE,
    ) -> PromptCollection:
        """Return a new collection with the given prompts added."""
        merged = list(self._prompts)
        for prompt in prompts:
            if policy == MergePolicy.REPLACE:
                _insert_replace(merged, prompt)
            else:
                merged.append(prompt)
        return PromptCollection(merged)

    def with_dot_prompt(self, prompt: Prompt) -> PromptCollection:
        """Return a new collection holding `prompt` as the dot prompt."""
        merged = list(self._prompts)
        _insert_replace(merged, prompt.as_dot_prompt())
        return PromptCollection(merged)

    def persistent(self) -> PromptCollection:
        """Prompts that came from a file (dot and scratch prompts excluded)."""
        return PromptCollection(p for p in self._prompts if p.filename is not None)
