"""Prompt template record."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Literal

# Name of the ephemeral "last executed prompt" entry
DOT_PROMPT_NAME = "."

# Header keys assigned directly to the record; everything else is a model option
RESERVED_KEYS = frozenset({"name", "model", "extract", "paste"})

# Deprecated `paste` header values
PASTE_MODES = ("after", "before", "replace")

PasteMode = Literal["after", "before", "replace"]


@dataclass(frozen=True)
class Prompt:
    """A single parsed prompt template.

    Attributes:
        name: Template identifier (first match wins on lookup)
        prompt: Template body, may contain placeholders
        model: Backend model override
        extract: Regular expression applied to model responses
        paste: Deprecated paste mode
        model_options: Non-reserved header fields, sent with the request.
            Stored as a read-only copy and left out of the hash
        filename: Source file, None for synthetic prompts
    """

    name: str
    prompt: str = ""
    model: str | None = None
    extract: str | None = None
    paste: PasteMode | None = None
    model_options: Mapping[str, str] = field(default_factory=dict, hash=False)
    filename: Path | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "model_options", MappingProxyType(dict(self.model_options)))

    @property
    def is_ephemeral(self) -> bool:
        """True for prompts without a source file (dot prompt, scratch content)."""
        return self.filename is None

    def as_dot_prompt(self, body: str | None = None) -> Prompt:
        """Return an ephemeral copy named `.`, optionally with a new body."""
        return replace(
            self,
            name=DOT_PROMPT_NAME,
            prompt=self.prompt if body is None else body,
            filename=None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "prompt": self.prompt,
            "model": self.model,
            "extract": self.extract,
            "paste": self.paste,
            "model_options": dict(self.model_options),
            "filename": str(self.filename) if self.filename else None,
        }
