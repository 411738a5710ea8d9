"""
Side channel for user-facing launch feedback.

Launch outcomes are reported here instead of being raised, so a failed
terminal spawn never interrupts session browsing.
"""

from typing import Protocol

from rich.console import Console
from rich.markup import escape


class Notifier(Protocol):
    def success(self, title: str, message: str) -> None: ...

    def failure(self, title: str, message: str) -> None: ...


class ConsoleNotifier:
    """Prints notifications to a rich console"""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(stderr=True)

    def success(self, title: str, message: str) -> None:
        self.console.print(f"[green]✓ [b]{escape(title)}[/b] {escape(message)}")

    def failure(self, title: str, message: str) -> None:
        self.console.print(f"[red]✗ [b]{escape(title)}[/b] {escape(message)}")

