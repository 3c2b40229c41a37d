"""Interactive terminal value source."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Mapping
from concurrent.futures import Future
from typing import TypeVar

import click

from .clipboard import NativeClipboard

logger = logging.getLogger(__name__)

# Registers served from the system clipboard when not given explicitly
CLIPBOARD_REGISTERS = {
    "+": "clipboard",
    "*": "primary",
}

T = TypeVar("T")


def run_in_daemon_thread(func: Callable[..., T], *args: object) -> asyncio.Future[T]:
    """Run a blocking call on a daemon thread and await its result.

    Unlike `asyncio.to_thread`, nothing waits for the thread on shutdown, so
    an interrupted run exits even while the call is still blocked on stdin.
    """
    future: Future[T] = Future()

    def worker() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(func(*args))
        except Exception as e:
            future.set_exception(e)

    threading.Thread(target=worker, name="qanda-prompt", daemon=True).start()
    return asyncio.wrap_future(future)


class ConsoleValueSource:
    """Prompts on the terminal and reads registers from the clipboard.

    Blocking terminal prompts run on a daemon thread so the event loop
    stays free while waiting for the user. Ctrl-D at a prompt gives an empty
    answer, which cancels. Ctrl-C interrupts the run at once; the pending
    prompt is abandoned.
    """

    def __init__(
        self,
        registers: Mapping[str, str] | None = None,
        filetype: str = "",
        clipboard: NativeClipboard | None = None,
    ):
        """Initialize the source.

        Args:
            registers: Register contents by name; take precedence over the clipboard
            filetype: Filetype reported for `$filetype`
            clipboard: Clipboard reader for the `+` and `*` registers
        """
        self.registers = dict(registers or {})
        self._filetype = filetype
        self.clipboard = clipboard or NativeClipboard()

    def _prompt_text(self, prompt: str) -> str:
        try:
            return click.prompt(
                prompt.rstrip(),
                default="",
                show_default=False,
                prompt_suffix=" ",
                err=True,
            )
        except click.Abort:
            click.echo(err=True)
            return ""

    def _prompt_choice(self, prompt: str, options: list[str]) -> int | None:
        click.echo(prompt, err=True)
        for option in options:
            click.echo(f"  {option}", err=True)
        try:
            answer = click.prompt(
                "Choice",
                type=click.IntRange(0, len(options)),
                default=0,
                show_default=False,
                err=True,
            )
        except click.Abort:
            click.echo(err=True)
            return None
        return answer - 1 if answer else None

    async def input(self, prompt: str) -> str:
        return await run_in_daemon_thread(self._prompt_text, prompt)

    async def select(self, prompt: str, options: list[str]) -> int | None:
        return await run_in_daemon_thread(self._prompt_choice, prompt, options)

    async def register(self, name: str) -> str | None:
        if name in self.registers:
            return self.registers[name]
        selection = CLIPBOARD_REGISTERS.get(name)
        if selection is None:
            logger.debug(f"Register '{name}' not provided")
            return None
        return await asyncio.to_thread(self.clipboard.paste, selection)  # type: ignore[arg-type]

    async def filetype(self) -> str:
        return self._filetype
