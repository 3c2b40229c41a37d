"""
Prompt file loader.

Loads every `*.prompts.md` file from a prompts directory, in sorted order,
into a PromptCollection. A file that fails to parse or read is logged and
skipped; the other files still load. When the directory holds no prompts
files a default one is created so there is always something to run.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

from .collection import MergePolicy, PromptCollection
from .models import Prompt
from .parser import PromptParseError, parse_prompts

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "*.prompts.md"
DEFAULT_FILENAME = "default.prompts.md"

DEFAULT_PROMPTS = """\
___
name: Make a request
___
${input:Enter request}
"""


class PromptFileError(Exception):
    """A prompts file could not be loaded."""

    def __init__(self, path: str | Path, cause: Exception):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to load prompts from '{self.path}': {cause}")


class PromptLoader:
    """Loads prompt collections from a prompts directory.

    Usage:
        loader = PromptLoader(Path("~/.qanda/prompts").expanduser())
        prompts = loader.load()
        prompt = prompts.require("Make a request")
    """

    def __init__(
        self,
        prompts_dir: Path,
        pattern: str = DEFAULT_PATTERN,
        require_names: bool = True,
        merge_policy: MergePolicy = MergePolicy.ACCUMULATE,
        create_default: bool = True,
    ):
        """Initialize the prompt loader.

        Args:
            prompts_dir: Directory holding prompts files
            pattern: Glob pattern selecting prompts files
            require_names: Reject records without a `name` header
            merge_policy: How duplicate names across files are merged
            create_default: Seed a default prompts file into an empty directory
        """
        self.prompts_dir = Path(prompts_dir)
        self.pattern = pattern
        self.require_names = require_names
        self.merge_policy = merge_policy
        self.create_default = create_default
        self.skipped: list[PromptFileError] = []

    def find_files(self) -> list[Path]:
        """Prompts files in the prompts directory, sorted by name."""
        if not self.prompts_dir.is_dir():
            return []
        return sorted(p for p in self.prompts_dir.glob(self.pattern) if p.is_file())

    def write_default_file(self) -> Path:
        """Create the default prompts file (and its directory)."""
        path = self.prompts_dir / DEFAULT_FILENAME
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(DEFAULT_PROMPTS, encoding="utf-8")
        logger.info(f"Created default prompts file {path}")
        return path

    def load_file(self, path: Path) -> list[Prompt]:
        """Parse a single prompts file.

        Args:
            path: Prompts file to read

        Returns:
            Prompts tagged with their source file

        Raises:
            PromptFileError: If the file cannot be read or parsed
        """
        try:
            text = path.read_text(encoding="utf-8")
            prompts = parse_prompts(text, require_names=self.require_names)
        except (OSError, UnicodeDecodeError, PromptParseError) as e:
            raise PromptFileError(path, e) from e
        return [replace(p, filename=path) for p in prompts]

    def load(self) -> PromptCollection:
        """Load all prompts files into a new collection.

        Files that fail are recorded in `skipped` and left out.

        Returns:
            PromptCollection in file order
        """
        self.skipped = []
        files = self.find_files()

        if not files and self.create_default:
            files = [self.write_default_file()]

        collection = PromptCollection()
        for path in files:
            try:
                prompts = self.load_file(path)
            except PromptFileError as e:
                logger.error(f"{e}, skipping")
                self.skipped.append(e)
                continue
            collection = collection.merge(prompts, self.merge_policy)
            logger.debug(f"Loaded {len(prompts)} prompt(s) from {path}")

        return collection


def load_prompts(
    prompts_dir: Path,
    pattern: str = DEFAULT_PATTERN,
    require_names: bool = True,
    merge_policy: MergePolicy = MergePolicy.ACCUMULATE,
    create_default: bool = True,
) -> PromptCollection:
    """Convenience function to load a prompts directory.

    Args:
        prompts_dir: Directory holding prompts files
        pattern: Glob pattern selecting prompts files
        require_names: Reject records without a `name` header
        merge_policy: How duplicate names across files are merged
        create_default: Seed a default prompts file into an empty directory

    Returns:
        PromptCollection
    """
    loader = PromptLoader(
        prompts_dir,
        pattern=pattern,
        require_names=require_names,
        merge_policy=merge_policy,
        create_default=create_default,
    )
    return loader.load()
