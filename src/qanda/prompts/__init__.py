"""
Prompt template parsing and placeholder substitution.

Provides:
- A fence-delimited header/body template format (`*.prompts.md` files)
- An order-sensitive, escape-aware placeholder substitution engine
- Immutable prompt collections with configurable merge policy
"""

from .collection import MergePolicy, PromptCollection, PromptNotFoundError
from .escapes import escape_string, unescape_string
from .loader import PromptFileError, PromptLoader, load_prompts
from .models import DOT_PROMPT_NAME, Prompt
from .parser import ParseErrorKind, PromptParseError, parse_prompts, parse_scratch_prompt
from .placeholders import (
    SubstitutionAborted,
    SubstitutionCancelled,
    SubstitutionError,
    SubstitutionErrorKind,
    ValueSource,
    substitute_placeholders,
)

__all__ = [
    "DOT_PROMPT_NAME",
    "MergePolicy",
    "ParseErrorKind",
    "Prompt",
    "PromptCollection",
    "PromptFileError",
    "PromptLoader",
    "PromptNotFoundError",
    "PromptParseError",
    "SubstitutionAborted",
    "SubstitutionCancelled",
    "SubstitutionError",
    "SubstitutionErrorKind",
    "ValueSource",
    "escape_string",
    "load_prompts",
    "parse_prompts",
    "parse_scratch_prompt",
    "substitute_placeholders",
    "unescape_string",
]
