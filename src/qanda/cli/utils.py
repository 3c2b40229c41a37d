"""
Shared utilities for CLI commands.
"""

import logging

import click

from qanda.config.app import QandaConfig
from qanda.prompts.collection import PromptCollection
from qanda.prompts.loader import PromptLoader

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, level: str = "warning") -> None:
    """
    Configure logging for CLI.

    Args:
        verbose: If True, enable DEBUG level logging
        level: Configured log level name, used when not verbose
    """
    log_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def get_config(ctx: click.Context) -> QandaConfig:
    """Get the loaded configuration from the click context."""
    config: QandaConfig = ctx.obj["config"]
    return config


def get_prompt_loader(ctx: click.Context) -> PromptLoader:
    """Create a prompt loader from the configured prompt settings."""
    settings = get_config(ctx).prompts
    return PromptLoader(
        settings.get_directory(),
        pattern=settings.pattern,
        require_names=settings.require_names,
        merge_policy=settings.merge_policy,
        create_default=settings.create_default,
    )


def load_prompt_collection(ctx: click.Context) -> PromptCollection:
    """Load the prompts directory, warning about skipped files."""
    loader = get_prompt_loader(ctx)
    collection = loader.load()
    for error in loader.skipped:
        click.echo(f"Warning: {error}, skipping.", err=True)
    return collection


def parse_assignments(values: tuple[str, ...], option: str) -> dict[str, str]:
    """Parse repeated NAME=VALUE options into a dict.

    Raises:
        click.BadParameter: If a value has no `=` or an empty name
    """
    result: dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=VALUE, got '{item}'", param_hint=option)
        result[name] = value
    return result
