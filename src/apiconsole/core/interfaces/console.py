"""Contracts between the core and its collaborators.

Protocols keep the processor and the shells independent from the concrete
console, error policy and resource transport; tests swap them freely.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ConsoleHost(Protocol):
    """Line-oriented console used by the shells."""

    @property
    def print_max_chars(self) -> int:
        """Maximum characters of response text to print (negative = no limit)."""

        ...

    def write(self, text: str) -> None: ...

    def write_line(self, line: str = "") -> None: ...

    def read_line(self, prompt: str) -> str:
        """Read one line; raises `EOFError` when input is exhausted."""

        ...


@runtime_checkable
class ErrorHandler(Protocol):
    """Policy applied when a shell reports an error."""

    def handle_error(self, message: str, exc: BaseException | None = None) -> None: ...


@runtime_checkable
class ResourceFetcher(Protocol):
    """Loads the content behind a resource locator (URI or local path)."""

    async def fetch_bytes(self, locator: str) -> bytes: ...

    async def fetch_text(self, locator: str) -> str: ...
