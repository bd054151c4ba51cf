"""Interactive prompts with Ctrl+C confirmation.

Every question the CLI asks goes through ``InterruptiblePrompt.ask``.  When
the user presses Ctrl+C while a question is open, they are asked whether
they really want to exit:

* yes (or a second Ctrl+C) raises ``UserAbort``;
* no re-asks the original question from scratch, same default, same
  validation.

Any other exception propagates unchanged.

Questions block inside the running event loop, where asyncio has replaced
the SIGINT handler with one that cancels the main task.  While a question is
open the default handler is put back, so Ctrl+C arrives as
``KeyboardInterrupt`` at the prompt instead.
"""

from __future__ import annotations

import signal
import threading
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import TypeVar

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.table import Table

from project_init.errors import UserAbort
from project_init.utils import console as default_console

T = TypeVar("T")

EXIT_QUESTION = "Do you really want to exit?"


@contextmanager
def keyboard_interrupts() -> Iterator[None]:
    """Deliver SIGINT as ``KeyboardInterrupt`` for the duration of the block."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGINT, signal.default_int_handler)
    try:
        yield
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)


class InterruptiblePrompt:
    """Runs prompt callables, turning Ctrl+C into an exit confirmation."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    def ask(self, question: Callable[[], T]) -> T:
        """Run *question* until it completes or the user confirms exit."""
        with keyboard_interrupts():
            return self._ask(question)

    def _ask(self, question: Callable[[], T]) -> T:
        while True:
            try:
                return question()
            except KeyboardInterrupt:
                self.console.print()
                if self._confirm_exit():
                    raise UserAbort() from None

    def _confirm_exit(self) -> bool:
        try:
            return Confirm.ask(EXIT_QUESTION, default=True, console=self.console)
        except KeyboardInterrupt:
            return True

    # ------------------------------------------------------------------
    # Question kinds
    # ------------------------------------------------------------------

    def select(self, message: str, choices: Sequence[str]) -> str:
        """Single-choice list prompt.

        The options are rendered as a numbered list; the user may answer
        with either the number or the label itself.  A label that is also a
        valid number means the label.
        """
        options = list(choices)
        if not options:
            raise ValueError("select() needs at least one choice")

        def question() -> str:
            table = Table.grid(padding=(0, 2))
            table.add_column(style="cyan", justify="right")
            table.add_column()
            for index, option in enumerate(options, start=1):
                table.add_row(f"{index})", escape(option))
            self.console.print(f"[bold]{escape(message)}[/bold]")
            self.console.print(table)

            numbers = [str(index) for index in range(1, len(options) + 1)]
            answer = Prompt.ask(
                "Select",
                choices=numbers + options,
                show_choices=False,
                default="1",
                console=self.console,
            )
            if answer in options:
                return answer
            if answer in numbers:
                return options[int(answer) - 1]
            return answer

        return self.ask(question)

    def text(
        self,
        message: str,
        default: str | None = None,
        validate: Callable[[str], str | None] | None = None,
    ) -> str:
        """Single-line text prompt with inline validation.

        *validate* returns an error message for a rejected answer or
        ``None`` to accept it.  A rejected answer prints the message and
        re-asks the same question.
        """

        kwargs = {"default": default} if default is not None else {}

        def question() -> str:
            while True:
                answer = Prompt.ask(message, console=self.console, **kwargs) or ""
                error = validate(answer) if validate else None
                if error is None:
                    return answer
                self.console.print(f"[prompt.invalid]{escape(error)}")

        return self.ask(question)

    def confirm(self, message: str, default: bool = False) -> bool:
        """Yes/no prompt."""
        return self.ask(lambda: Confirm.ask(message, default=default, console=self.console))
