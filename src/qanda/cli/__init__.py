"""
Qanda CLI entry point.
"""

import click

from qanda.config.app import load_config

from .prompts import prompts
from .run import info, run
from .utils import setup_logging


@click.group()
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to custom configuration file",
)
@click.option(
    "--prompts-dir",
    type=click.Path(file_okay=False),
    help="Directory holding prompts files (overrides configuration)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config: str | None, prompts_dir: str | None, verbose: bool) -> None:
    """Qanda - Prompt templates for a local language model."""
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config, cli_overrides={"prompts.directory": prompts_dir})
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    setup_logging(verbose, ctx.obj["config"].logging.level)


# Register commands
cli.add_command(prompts)
cli.add_command(run)
cli.add_command(info)
