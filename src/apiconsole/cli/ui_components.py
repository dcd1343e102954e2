"""Rich components for the CLI.

Scope:
- Banner shown before the interactive shell.
- Fatal error output of the entrypoint (message plus cause).

Note: shell output goes through `console_hosts`, not through these helpers.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.text import Text


def print_banner(console: Console, *, services: int, base_url: str | None) -> None:
    """Welcome banner shown before the interactive shell starts."""

    title = Text("apiconsole", style="bold cyan")
    target = base_url or "no base URL"
    subtitle = Text(f"{services} services • {target} • 'help' to list them", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def print_failure(console: Console, exc: BaseException) -> None:
    """Report a fatal error: the message plus the underlying cause, if any."""

    console.print(Text(str(exc) or type(exc).__name__, style="red"))
    cause = exc.__cause__
    if cause is not None and str(cause) and str(cause) != str(exc):
        console.print(Text(str(cause), style="dim"))
