"""Exception taxonomy shared by the parser, processor and shells.

Scope:
- Every error raised by the console derives from `ConsoleError`.
- API-level failures are not errors here: they travel as `ApiError` and end
  up as a `Response`.
"""

from __future__ import annotations


class ConsoleError(Exception):
    """Base class for every error raised by the console itself."""


class CommandSyntaxError(ConsoleError):
    """The input line could not be parsed into a command."""


class ResolutionError(ConsoleError):
    """The command names a service or verb that the catalog does not know."""


class BindingError(ConsoleError):
    """An argument could not be resolved or coerced for its parameter."""


class CatalogError(ConsoleError):
    """A catalog reference could not be loaded."""


class ShellError(ConsoleError):
    """Fatal shell-level failure; aborts a scripted session."""
