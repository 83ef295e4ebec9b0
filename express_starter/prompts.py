"""Interactive choice prompts.

The materializer never talks to the terminal directly; it asks a
:class:`ChoiceProvider`.  :class:`RichChoiceProvider` is the terminal
implementation, tests pass a stub.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from .utils import console as default_console


class ChoiceProvider(Protocol):
    """Anything that can ask the user to pick one of several options."""

    def choose(self, message: str, choices: Sequence[str]) -> str:
        """Block until the user selects one of *choices* and return it."""
        ...


class RichChoiceProvider:
    """Numbered-list prompt rendered with Rich.

    The user may answer with either the option number or the option text.
    The first option is the default.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    def choose(self, message: str, choices: Sequence[str]) -> str:
        if not choices:
            raise ValueError("choices must not be empty")

        self.console.print(f"[bold]? {escape(message)}[/bold]")
        for index, choice in enumerate(choices, start=1):
            self.console.print(f"  [cyan]{index}[/cyan]) {escape(choice)}")

        accepted = [str(i) for i in range(1, len(choices) + 1)] + list(choices)
        answer = Prompt.ask(
            "Select",
            choices=accepted,
            default="1",
            show_choices=False,
            console=self.console,
        )
        if answer.isdigit():
            return choices[int(answer) - 1]
        return answer
