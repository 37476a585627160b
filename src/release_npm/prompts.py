"""Operator interaction.

Workflow stages never read stdin directly; they receive a Prompter. The
CLI passes RichPrompter, and tests pass a scripted implementation with
canned answers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar

from rich.prompt import Confirm, IntPrompt, Prompt

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rich.console import Console

T = TypeVar("T")


@dataclass(frozen=True)
class Choice(Generic[T]):
    """One option in a menu."""

    label: str
    value: T


class Prompter(Protocol):
    """Blocking request/response exchange with the operator."""

    def choose(self, question: str, options: Sequence[Choice[T]]) -> T:
        """Present numbered options and return the chosen value."""
        ...

    def confirm(self, question: str, default: bool = False) -> bool:
        """Ask a yes/no question."""
        ...

    def ask_secret(self, question: str) -> str:
        """Ask for a value without echoing it."""
        ...


class RichPrompter:
    """Prompter that talks to a terminal through rich."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def choose(self, question: str, options: Sequence[Choice[T]]) -> T:
        if not options:
            raise ValueError("choose() needs at least one option")

        self.console.print(f"\n[bold]{question}[/]")
        for index, option in enumerate(options, start=1):
            self.console.print(f"  {index}) {option.label}")

        while True:
            answer = IntPrompt.ask(
                f"\nEnter choice (1-{len(options)})",
                console=self.console,
            )
            if 1 <= answer <= len(options):
                return options[answer - 1].value
            self.console.print("[yellow]⚠ Invalid choice. Please try again.[/]")

    def confirm(self, question: str, default: bool = False) -> bool:
        return Confirm.ask(question, default=default, console=self.console)

    def ask_secret(self, question: str) -> str:
        return Prompt.ask(question, password=True, console=self.console).strip()
