import json
import logging
from pathlib import Path

import click

from qanda.prompts.formatting import format_prompts, prompt_to_lines
from qanda.prompts.parser import PromptParseError, parse_prompts

from .utils import get_config, load_prompt_collection

logger = logging.getLogger(__name__)


@click.group()
def prompts() -> None:
    """Manage prompt templates."""
    pass


@prompts.command("list")
@click.option("--json", "json_format", is_flag=True, help="Output as JSON")
@click.pass_context
def list_prompts(ctx: click.Context, json_format: bool) -> None:
    """List prompt names."""
    collection = load_prompt_collection(ctx)

    if json_format:
        click.echo(json.dumps([p.to_dict() for p in collection], indent=2))
        return

    if not len(collection):
        click.echo("No prompts found.")
        return

    for name in collection.names():
        click.echo(name)


@prompts.command("show")
@click.argument("name")
@click.pass_context
def show_prompt(ctx: click.Context, name: str) -> None:
    """Show a prompt's header and body."""
    collection = load_prompt_collection(ctx)
    prompt = collection.get(name)
    if prompt is None:
        raise click.ClickException(f"No prompt named '{name}'")

    for line in prompt_to_lines(prompt):
        click.echo(line)
    if prompt.filename:
        click.echo(f"\n({prompt.filename})", err=True)


@prompts.command("check")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def check_prompts(ctx: click.Context, files: tuple[str, ...]) -> None:
    """Validate prompts files."""
    require_names = get_config(ctx).prompts.require_names
    failed = 0

    for file in files:
        try:
            parsed = parse_prompts(Path(file).read_text(encoding="utf-8"), require_names=require_names)
        except (OSError, UnicodeDecodeError, PromptParseError) as e:
            click.echo(f"{file}: {e}", err=True)
            failed += 1
            continue
        click.echo(f"{file}: {len(parsed)} prompt(s) OK")

    if failed:
        ctx.exit(1)


@prompts.command("dump")
@click.option(
    "--file",
    "file_filter",
    help="Only dump prompts loaded from this file name",
)
@click.pass_context
def dump_prompts(ctx: click.Context, file_filter: str | None) -> None:
    """Write loaded prompts in template file format."""
    collection = load_prompt_collection(ctx).persistent()
    selected = [
        p for p in collection if file_filter is None or (p.filename and p.filename.name == file_filter)
    ]
    click.echo(format_prompts(selected), nl=False)
