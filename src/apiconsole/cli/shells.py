"""Interactive and scripted shells.

Both drivers share `Shell.handle`, which tries, in order:

1. `vars`: list the defined variables;
2. `help [service|shell]`: catalog or shell help;
3. `get`/`set` meta-commands (`debug`, `downloaddir`, `var`);
4. anything else goes to the command processor, and the response is captured
   into the reserved `$LastResponse*` variables.
"""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from http import HTTPStatus
from pathlib import Path
from typing import TextIO

from apiconsole.adapters.mime_types import extension_for, is_text_media_type
from apiconsole.cli.error_handlers import ConsolePrintErrorHandler, RaiseShellErrorHandler
from apiconsole.core.domain.models import Parameter, ParamKind, Response
from apiconsole.core.errors import CommandSyntaxError, ResolutionError, ShellError
from apiconsole.core.interfaces.console import ConsoleHost, ErrorHandler
from apiconsole.core.parser import CommandParser
from apiconsole.core.processor import CommandProcessor
from apiconsole.core.session import (
    LAST_RESPONSE_STATUS_CODE_VAR,
    LAST_RESPONSE_URI_VAR,
    LAST_RESPONSE_VAR,
    Session,
)

LOGGER = logging.getLogger(__name__)

EXIT_VERBS = ("exit", "quit", "bye", "q")

GET_VERB = "get"
SET_VERB = "set"
DEBUG_SETTING = "debug"
DOWNLOAD_DIR_SETTING = "downloaddir"
VAR_SETTING = "var"
PRINT_VARS_VERB = "vars"
HELP_VERB = "help"

SHELL_HELP = (
    "Shell help:",
    "  get/set debug on/off       - Turn on/off debug mode",
    "  get/set downloaddir <path> - Get or set download dir",
    "  get/set var <name>=<value> - Get or set variable",
    "  set var <name>             - Undefine variable",
    "  vars                       - List all defined variables",
    "  help                       - Help",
    "  q/quit/exit/bye            - Quit",
)


def is_exit(line: str) -> bool:
    return line in EXIT_VERBS


def status_line(status_code: int) -> str:
    try:
        return f"{status_code} {HTTPStatus(status_code).phrase}"
    except ValueError:
        return str(status_code)


def error_message(status_code: int) -> str:
    if status_code == HTTPStatus.NOT_FOUND:
        return f"{status_line(status_code)} (hint: incorrect number of parameters?)"
    return status_line(status_code)


class Shell(ABC):
    """Behavior shared by the interactive and scripted drivers."""

    def __init__(
        self,
        host: ConsoleHost,
        parser: CommandParser,
        processor: CommandProcessor,
        session: Session,
        error_handler: ErrorHandler,
    ) -> None:
        self._host = host
        self._parser = parser
        self._processor = processor
        self._session = session
        self._error_handler = error_handler
        session.variables.clear_last_response()

    @abstractmethod
    async def run(self) -> None:
        """Drive the session until its input is exhausted."""

    async def handle(self, line: str) -> None:
        if not line.strip():
            return
        if self._print_vars(line) or self._help(line) or self._get_or_set(line):
            return
        await self._execute(line)

    # -- meta-commands -----------------------------------------------------

    def _print_vars(self, line: str) -> bool:
        if line != PRINT_VARS_VERB:
            return False
        self._host.write_line("Vars:")
        for name in self._session.variables:
            self._host.write_line(f"  ${name}")
        return True

    def _help(self, line: str) -> bool:
        tokens = line.split()
        if tokens[0] != HELP_VERB:
            return False

        service = tokens[1] if len(tokens) > 1 else ""
        if service == "shell":
            for text in SHELL_HELP:
                self._host.write_line(text)
            self._host.write_line()
            return True

        self._host.write_line(self._processor.get_help(service))
        if not service:
            self._host.write_line("'help shell' to print help for this shell")
            self._host.write_line()
        return True

    def _get_or_set(self, line: str) -> bool:
        first = line.split()[0]
        if first not in (GET_VERB, SET_VERB):
            return False
        is_set = first == SET_VERB

        try:
            command = self._parser.parse(line)
        except CommandSyntaxError:
            return False

        verb, parameters = command.verb, list(command.parameters)
        if not (
            self._debug(is_set, verb, parameters)
            or self._download_dir(is_set, verb, parameters)
            or self._var(is_set, verb, parameters)
        ):
            self._error_handler.handle_error("Error: Unknown command")
        self._host.write_line()
        return True

    @staticmethod
    def _dispatch(
        is_set: bool,
        expected: str,
        verb: str,
        getter: Callable[[], bool],
        setter: Callable[[], bool],
        then: Callable[[], None] | None = None,
    ) -> bool:
        if verb != expected:
            return False
        result = setter() if is_set else getter()
        if then is not None:
            then()
        return result

    def _debug(self, is_set: bool, verb: str, parameters: list[Parameter]) -> bool:
        def set_debug() -> bool:
            if len(parameters) != 1 or parameters[0].name:
                return False
            value = parameters[0].value
            if value not in ("on", "off"):
                return False
            self._session.debug = value == "on"
            return True

        return self._dispatch(
            is_set,
            DEBUG_SETTING,
            verb,
            lambda: not parameters,
            set_debug,
            lambda: self._host.write_line("Debug: On" if self._session.debug else "Debug: Off"),
        )

    def _download_dir(self, is_set: bool, verb: str, parameters: list[Parameter]) -> bool:
        def set_download_dir() -> bool:
            if len(parameters) != 1 or parameters[0].name:
                return False
            self._session.download_dir = Path(parameters[0].value)
            return True

        return self._dispatch(
            is_set,
            DOWNLOAD_DIR_SETTING,
            verb,
            lambda: not parameters,
            set_download_dir,
            lambda: self._host.write_line(f"Download dir: '{self._session.download_dir}'"),
        )

    def _var(self, is_set: bool, verb: str, parameters: list[Parameter]) -> bool:
        if len(parameters) != 1:
            return False
        parameter = parameters[0]
        variables = self._session.variables

        def undefined(name: str) -> None:
            self._error_handler.handle_error(f"Error: ${name} is undefined")

        def get_var() -> bool:
            if parameter.name:
                return False
            if parameter.value not in variables:
                undefined(parameter.value)
            else:
                self._host.write_line(f"var: ${parameter.value} = {self._shorten(variables[parameter.value])}")
            return True

        def set_var() -> bool:
            if not parameter.name:
                if variables.pop(parameter.value, None) is None:
                    undefined(parameter.value)
                return True

            value = parameter.value
            if parameter.kind is ParamKind.VARIABLE_REFERENCE:
                if parameter.value not in variables:
                    undefined(parameter.value)
                    return True
                value = variables[parameter.value]

            variables[parameter.name] = value
            self._host.write_line(f"var ${parameter.name} = {self._shorten(value)}")
            return True

        return self._dispatch(is_set, VAR_SETTING, verb, get_var, set_var)

    # -- command execution -------------------------------------------------

    async def _execute(self, line: str) -> None:
        try:
            response = await self._processor.execute(line)
            self._handle_response(response)
        except CommandSyntaxError as exc:
            self._error_handler.handle_error(f"Parse error: {exc}", exc)
        except ResolutionError as exc:
            self._error_handler.handle_error(f"Invalid operation: {exc}", exc)
        except ShellError as exc:
            self._error_handler.handle_error(str(exc), exc)
        except Exception as exc:
            self._error_handler.handle_error(f"Error: {exc}", exc)
        self._host.write_line()

    def _handle_response(self, response: Response) -> None:
        variables = self._session.variables
        variables.clear_last_response()
        variables[LAST_RESPONSE_STATUS_CODE_VAR] = str(response.status_code)

        media_type = response.media_type
        text = response.text() if is_text_media_type(media_type) else ""

        if self._session.debug:
            if response.is_error:
                self._host.write_line(f"Error: {error_message(response.status_code)}")
            else:
                self._host.write_line(f"Status code: {status_line(response.status_code)}")
            if response.headers:
                self._host.write_line("Headers:")
                for name, values in response.headers.items():
                    self._host.write_line(f"  {name} = {', '.join(values)}")

        saved = (self._session.debug or not response.is_error) and self._save_to_file(response)
        if not saved:
            variables[LAST_RESPONSE_VAR] = text
            if text.strip():
                self._host.write_line(self._shorten(text))

        if response.is_error:
            self._error_handler.handle_error(f"Error: {error_message(response.status_code)}")

    def _save_to_file(self, response: Response) -> bool:
        media_type = response.media_type
        if media_type is None or is_text_media_type(media_type) or not response.body:
            return False

        directory = Path(self._session.download_dir).expanduser()
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{uuid.uuid4().hex}.{extension_for(media_type)}"
        path.write_bytes(response.body)

        uri = path.resolve().as_uri()
        LOGGER.debug("Saved %d byte(s) of %s to %s", len(response.body), media_type, path)
        self._host.write_line(f"Response saved as '{uri}'")
        self._session.variables[LAST_RESPONSE_URI_VAR] = uri
        return True

    def _shorten(self, text: str) -> str:
        limit = self._host.print_max_chars
        if limit < 0 or len(text) <= limit:
            return text
        return text[:limit] + " ..."


class InteractiveShell(Shell):
    """Reads commands from the operator until an exit verb (or EOF)."""

    def __init__(
        self,
        host: ConsoleHost,
        parser: CommandParser,
        processor: CommandProcessor,
        session: Session,
    ) -> None:
        super().__init__(host, parser, processor, session, ConsolePrintErrorHandler(host))

    async def run(self) -> None:
        while True:
            try:
                line = self._host.read_line("$ ").strip()
            except (EOFError, KeyboardInterrupt):
                self._host.write_line()
                return
            if not line:
                continue
            if is_exit(line):
                return
            try:
                await self.handle(line)
            except CommandSyntaxError as exc:
                self._host.write_line(str(exc))


class ScriptedShell(Shell):
    """Runs every line of a script; the first error aborts with `ShellError`."""

    def __init__(
        self,
        host: ConsoleHost,
        parser: CommandParser,
        processor: CommandProcessor,
        session: Session,
        source: TextIO,
    ) -> None:
        super().__init__(host, parser, processor, session, RaiseShellErrorHandler())
        self._source = source

    async def run(self) -> None:
        try:
            lines = [line.strip() for line in self._source.read().splitlines()]
            for line in lines:
                if line:
                    await self.handle(line)
        except ShellError:
            raise
        except Exception as exc:
            raise ShellError(str(exc)) from exc
