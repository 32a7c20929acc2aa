"""Interactive prompts built on ``rich.prompt``.

The scaffolding engine and the config-update flow only ever talk to a
``Prompter``; tests substitute a scripted object with the same methods.
Every method raises :class:`UserCancelled` when the user hits Ctrl-C or
closes stdin, which the CLI turns into a clean exit.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from .utils import console as default_console


class UserCancelled(Exception):
    """Raised when the user cancels at any prompt."""


# (value, label, hint)
Option = tuple[str, str, str]


class Prompter:
    """Rich-based implementation of the prompt collaborator."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    def text(
        self,
        message: str,
        default: str | None = None,
        validator: Callable[[str], str | None] | None = None,
    ) -> str:
        """Ask for free text.

        Args:
            message: Prompt shown to the user.
            default: Value used when the user just presses Enter.
            validator: Optional callable returning an error message for bad
                input (or ``None`` when the input is acceptable). Bad input is
                reported and asked again.
        """
        if not isinstance(default, str):
            default = None
        while True:
            try:
                answer = Prompt.ask(
                    f"[cyan]{message}[/cyan]",
                    default=default if default is not None else "",
                    show_default=bool(default),
                    console=self.console,
                )
            except (KeyboardInterrupt, EOFError) as exc:
                raise UserCancelled() from exc
            answer = str(answer).strip()
            if validator is None:
                return answer
            error = validator(answer)
            if error is None:
                return answer
            self.console.print(f"[red]{error}[/red]")

    def select(self, message: str, options: Sequence[Option]) -> str:
        """Ask for exactly one option; returns its value."""
        if not options:
            raise ValueError("select() needs at least one option")
        self._render_options(message, options)
        valid_choices = [str(i) for i in range(1, len(options) + 1)]
        try:
            choice = Prompt.ask(
                "Select", choices=valid_choices, show_choices=False, console=self.console
            )
        except (KeyboardInterrupt, EOFError) as exc:
            raise UserCancelled() from exc
        return options[int(choice) - 1][0]

    def multiselect(
        self,
        message: str,
        options: Sequence[Option],
        defaults: Sequence[str] = (),
        required: bool = False,
    ) -> list[str]:
        """Ask for any number of options by their numbers (comma-separated).

        An empty answer selects *defaults*. When *required* is set an empty
        selection is asked again.
        """
        self._render_options(message, options)
        default_numbers = [
            str(i) for i, (value, _, _) in enumerate(options, 1) if value in defaults
        ]
        while True:
            try:
                answer = Prompt.ask(
                    "Numbers (comma-separated)",
                    default=",".join(default_numbers),
                    show_default=bool(default_numbers),
                    console=self.console,
                )
            except (KeyboardInterrupt, EOFError) as exc:
                raise UserCancelled() from exc

            selected, bad = _parse_numbers(answer, len(options))
            if bad:
                self.console.print(f"[red]Not a valid option: {', '.join(bad)}[/red]")
                continue
            if required and not selected:
                self.console.print("[red]Select at least one option.[/red]")
                continue
            return [options[i - 1][0] for i in selected]

    def confirm(self, message: str, default: bool = True) -> bool:
        """Y/N confirmation."""
        try:
            return Confirm.ask(f"[cyan]{message}[/cyan]", default=default, console=self.console)
        except (KeyboardInterrupt, EOFError) as exc:
            raise UserCancelled() from exc

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        """Show a spinner while the wrapped block runs."""
        with self.console.status(message):
            yield

    def _render_options(self, message: str, options: Sequence[Option]) -> None:
        self.console.print(f"\n[bold cyan]{message}[/bold cyan]")
        table = Table(show_header=False, box=None)
        for i, (_, label, hint) in enumerate(options, 1):
            hint_text = f"[dim]({hint})[/dim]" if hint else ""
            table.add_row(f"[cyan]{i})[/cyan]", label, hint_text)
        self.console.print(table)


def _parse_numbers(answer: str, count: int) -> tuple[list[int], list[str]]:
    """Parse ``"1, 3,4"`` into ``[1, 3, 4]``; returns (numbers, rejected tokens)."""
    numbers: list[int] = []
    bad: list[str] = []
    for token in answer.split(","):
        token = token.strip()
        if not token:
            continue
        if token.isdigit() and 1 <= int(token) <= count:
            if int(token) not in numbers:
                numbers.append(int(token))
        else:
            bad.append(token)
    return numbers, bad
