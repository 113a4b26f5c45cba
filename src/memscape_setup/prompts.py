"""Interactive prompts and status output on a rich console."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from rich.console import Console
from rich.markup import escape


class LineSource(Protocol):
    """Provides answers to prompts one line at a time."""

    def read_line(self, prompt: str) -> str | None:
        """Show the prompt and return the next line, or None at end of input."""
        ...


class ConsoleLineSource:
    """Reads answers from standard input through the console."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def read_line(self, prompt: str) -> str | None:
        try:
            return self.console.input(prompt)
        except EOFError:
            self.console.print()
            return None


class ScriptedLineSource:
    """Serves pre-supplied answers, e.g. lines piped in ahead of time."""

    def __init__(self, lines: Iterable[str], console: Console | None = None) -> None:
        self._lines = deque(lines)
        self.console = console

    def read_line(self, prompt: str) -> str | None:
        line = self._lines.popleft() if self._lines else None
        if self.console is not None:
            # Echo the answer after its prompt.
            self.console.print(prompt, escape(line or ""), sep="", markup=True)
        return line


@dataclass
class SelectOption:
    """One choice in a numbered selection prompt."""

    label: str
    value: str


class Prompter:
    """Asks questions and prints status lines in the setup's visual style."""

    def __init__(self, console: Console, source: LineSource | None = None) -> None:
        self.console = console
        self.source = source or ConsoleLineSource(console)

    def prompt(self, question: str) -> str:
        """Ask a free-text question; end of input yields an empty answer."""
        answer = self.source.read_line(f"  [cyan]?[/cyan] {question} ")
        return (answer or "").strip()

    def confirm(self, question: str, default_yes: bool = True) -> bool:
        hint = "(Y/n)" if default_yes else "(y/N)"
        answer = self.prompt(f"{question} [dim]{hint}[/dim]")
        if not answer:
            return default_yes
        return answer.lower().startswith("y")

    def select(self, question: str, options: list[SelectOption]) -> str:
        """Ask for a numbered choice.

        Anything that is not a valid option number selects the first option.
        """
        self.console.print()
        self.console.print(f"  [cyan]?[/cyan] {question}")
        for i, option in enumerate(options, start=1):
            self.console.print(f"    [dim]{i}.[/dim] {option.label}")

        answer = self.prompt(f"Enter choice [dim](1-{len(options)})[/dim]")
        try:
            index = int(answer) - 1
        except ValueError:
            index = -1
        if 0 <= index < len(options):
            return options[index].value
        return options[0].value

    def banner(self) -> None:
        self.console.print()
        self.console.print("  [bold magenta]Memscape Setup[/bold magenta]")
        self.console.print(f"  [dim]{'─' * 20}[/dim]")
        self.console.print()

    def section(self, title: str) -> None:
        self.console.print()
        self.console.print(f"  [dim]── {title} ──[/dim]")
        self.console.print()

    def success(self, message: str) -> None:
        self.console.print(f"  [bold green]✓[/bold green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"  [bold red]✗[/bold red] {escape(message)}")

    def info(self, message: str) -> None:
        self.console.print(f"  [cyan]ℹ[/cyan] {message}")

    def warn(self, message: str) -> None:
        self.console.print(f"  [yellow]⚠[/yellow] {message}")

    def blank(self) -> None:
        self.console.print()
