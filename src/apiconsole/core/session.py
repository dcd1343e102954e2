"""Session state shared by the shells and the command processor.

Scope:
- Variables (`$name`), including the reserved `$LastResponse*` ones.
- Runtime settings changed by meta-commands (debug, download dir).

One `Session` is created when the console starts and discarded when it exits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from apiconsole.core.config import AppSettings

LAST_RESPONSE_VAR = "LastResponse"
LAST_RESPONSE_URI_VAR = "LastResponseUri"
LAST_RESPONSE_STATUS_CODE_VAR = "LastResponseStatusCode"

RESERVED_VARIABLES = (LAST_RESPONSE_VAR, LAST_RESPONSE_URI_VAR, LAST_RESPONSE_STATUS_CODE_VAR)


class VariableStore(dict[str, str]):
    """Named string variables (`$name`), case-sensitive exact keys."""

    def clear_last_response(self) -> None:
        for name in RESERVED_VARIABLES:
            self[name] = ""


@dataclass
class Session:
    """Mutable state of one console session."""

    variables: VariableStore = field(default_factory=VariableStore)
    debug: bool = False
    download_dir: Path = field(default_factory=Path.home)

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "Session":
        return cls(download_dir=settings.download_dir)
