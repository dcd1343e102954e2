"""Error policies of the shells.

Scope:
- Interactive sessions print the message and read the next line.
- Scripted sessions stop at the first reported error.
"""

from __future__ import annotations

import logging

from apiconsole.core.errors import ShellError
from apiconsole.core.interfaces.console import ConsoleHost

LOGGER = logging.getLogger(__name__)


class ConsolePrintErrorHandler:
    """Interactive sessions: print the message and keep going."""

    def __init__(self, host: ConsoleHost) -> None:
        self._host = host

    def handle_error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            LOGGER.debug("Command failed", exc_info=exc)
        self._host.write_line(message)


class RaiseShellErrorHandler:
    """Scripted sessions: any reported error aborts the script."""

    def handle_error(self, message: str, exc: BaseException | None = None) -> None:
        raise ShellError(message) from exc
