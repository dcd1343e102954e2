"""Console hosts used by the shells.

`RichConsoleHost` prints through a `rich.console.Console`; `NullConsoleHost`
discards output (scripts run without `--print`).
"""

from __future__ import annotations

from rich.console import Console


class RichConsoleHost:
    """`ConsoleHost` backed by Rich. Output is written verbatim (no markup)."""

    def __init__(self, console: Console | None = None, *, print_max_chars: int = 1200) -> None:
        self._console = console or Console()
        self._print_max_chars = print_max_chars

    @property
    def print_max_chars(self) -> int:
        return self._print_max_chars

    def write(self, text: str) -> None:
        self._console.print(text, end="", markup=False, highlight=False, soft_wrap=True)

    def write_line(self, line: str = "") -> None:
        self._console.print(line, markup=False, highlight=False, soft_wrap=True)

    def read_line(self, prompt: str) -> str:
        return self._console.input(prompt)


class NullConsoleHost:
    print_max_chars = -1

    def write(self, text: str) -> None:
        pass

    def write_line(self, line: str = "") -> None:
        pass

    def read_line(self, prompt: str) -> str:
        raise EOFError
