import asyncio
import json
import logging

import click

from qanda.prompts.collection import PromptNotFoundError
from qanda.prompts.parser import PromptParseError
from qanda.prompts.placeholders import (
    SELECT_CHOICES,
    SubstitutionCancelled,
    SubstitutionError,
    ValueSource,
)
from qanda.requests import build_chat_request
from qanda.session import PreparedPrompt, Session
from qanda.sources import ConsoleValueSource, StaticValueSource

from .utils import get_config, load_prompt_collection, parse_assignments

logger = logging.getLogger(__name__)

SELECT_SOURCES = {token.lstrip("$"): index for index, (_, token) in enumerate(SELECT_CHOICES)}


def make_value_source(
    answers: tuple[str, ...],
    select_source: str | None,
    registers: dict[str, str],
    filetype: str,
) -> ValueSource:
    """Build a scripted source when answers are given, else an interactive one."""
    if answers or select_source:
        choice = SELECT_SOURCES[select_source] if select_source else None
        return StaticValueSource(
            answers=answers,
            choice=choice,
            registers=registers,
            filetype=filetype,
        )
    return ConsoleValueSource(registers=registers, filetype=filetype)


@click.command()
@click.argument("name", required=False)
@click.option(
    "--text",
    "scratch",
    help="Run this prompt content instead of a named prompt",
)
@click.option(
    "--answer",
    "-a",
    "answers",
    multiple=True,
    help="Answer for the next input placeholder (repeatable, disables prompting)",
)
@click.option(
    "--select-source",
    type=click.Choice(list(SELECT_SOURCES)),
    help="Source used for $select (disables prompting)",
)
@click.option(
    "--register",
    "-r",
    "register_values",
    multiple=True,
    help="Register contents as NAME=VALUE (repeatable)",
)
@click.option("--filetype", default="", help="Filetype substituted for $filetype")
@click.option("--json", "json_format", is_flag=True, help="Output the chat request as JSON")
@click.pass_context
def run(
    ctx: click.Context,
    name: str | None,
    scratch: str | None,
    answers: tuple[str, ...],
    select_source: str | None,
    register_values: tuple[str, ...],
    filetype: str,
    json_format: bool,
) -> None:
    """Expand a prompt's placeholders and print the result."""
    if (name is None) == (scratch is None):
        raise click.UsageError("Give either a prompt NAME or --text")

    config = get_config(ctx)
    registers = parse_assignments(register_values, "--register")
    source = make_value_source(answers, select_source, registers, filetype)

    async def _run(session: Session) -> PreparedPrompt:
        if scratch is not None:
            return await session.prepare_scratch(scratch, source)
        assert name is not None
        return await session.prepare(name, source)

    session = Session(load_prompt_collection(ctx) if name is not None else None)
    try:
        prepared = asyncio.run(_run(session))
    except (SubstitutionCancelled, KeyboardInterrupt):
        click.echo("Cancelled.", err=True)
        ctx.exit(1)
    except (SubstitutionError, PromptNotFoundError, PromptParseError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    if json_format:
        request = build_chat_request(prepared, config)
        click.echo(json.dumps(request.to_dict(), indent=2))
    else:
        click.echo(prepared.text)


@click.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show provider, model and prompts directory."""
    config = get_config(ctx)
    click.echo(f'provider: "{config.provider}", model: "{config.model}"')
    click.echo(f"backend: http://{config.host}:{config.port}")
    click.echo(f"prompts: {config.prompts.get_directory()}")
