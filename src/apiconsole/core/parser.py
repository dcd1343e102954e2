"""Command-line mini-language parser.

    <service> <verb> [<param> ...]
    <param>  ::= [<name> '='] <value>
    <value>  ::= "'" json-text "'" | '$' identifier | '"' text '"' | token

Tokens are matched greedily from the left with anchored regular expressions.
The named-parameter prefix is checked before the value kind is chosen, so
`a=b=c` is the parameter `a` with the plain value `b=c`.
"""

from __future__ import annotations

import re

from apiconsole.core.domain.models import Parameter, ParamKind, ParsedCommand
from apiconsole.core.errors import CommandSyntaxError

_IDENTIFIER = re.compile(r"^(?!\d)\w+")
_VARIABLE = re.compile(r"^\$(?!\d)\w+")
_SINGLE_QUOTED = re.compile(r"^'(?:[^']|'')*'", re.DOTALL)
_DOUBLE_QUOTED = re.compile(r'^"(?:[^"]|"")*"', re.DOTALL)
_ASSIGN_OPERATOR = re.compile(r"^\s*=\s*")
_PLAIN = re.compile(r"^\S+")
_TRIM_START = re.compile(r"^[\s=]+")
_TRIM_END = re.compile(r"[\s=]+$")


class CommandParser:
    """Turns one input line into a `ParsedCommand`."""

    def parse(self, line: str) -> ParsedCommand:
        service = _match(_IDENTIFIER, line)
        if not service:
            raise CommandSyntaxError("Unknown service")

        rest = _remove_start(line, service)
        verb = _match(_IDENTIFIER, rest)
        if not verb:
            raise CommandSyntaxError(f"Unable to parse verb for '{service}'")

        rest = _remove_start(rest, verb)
        parameters: list[Parameter] = []
        while rest.strip():
            rest, parameter = _parse_parameter(rest)
            parameters.append(parameter)

        return ParsedCommand(service=service, verb=verb, parameters=tuple(parameters))


def _parse_parameter(text: str) -> tuple[str, Parameter]:
    prefix = _named_prefix(text)
    name = ""
    if prefix:
        text = _remove_start(text, prefix)
        name = _TRIM_END.sub("", prefix)

    literal = _match(_SINGLE_QUOTED, text)
    if literal:
        return _remove_start(text, literal), Parameter(kind=ParamKind.JSON_LITERAL, name=name, value=_unescape(literal))

    variable = _match(_VARIABLE, text)
    if variable:
        return _remove_start(text, variable), Parameter(
            kind=ParamKind.VARIABLE_REFERENCE, name=name, value=variable[1:]
        )

    quoted = _match(_DOUBLE_QUOTED, text)
    if quoted:
        return _remove_start(text, quoted), Parameter(kind=ParamKind.PLAIN_STRING, name=name, value=_unescape(quoted))

    plain = _match(_PLAIN, text)
    return _remove_start(text, plain), Parameter(kind=ParamKind.PLAIN_STRING, name=name, value=plain)


def _named_prefix(text: str) -> str:
    """`name =` prefix (identifier plus assignment operator), or empty."""

    identifier = _match(_IDENTIFIER, text)
    if not identifier:
        return ""
    operator = _match(_ASSIGN_OPERATOR, text[len(identifier):])
    if not operator:
        return ""
    return identifier + operator


def _unescape(quoted: str) -> str:
    quote = quoted[0]
    return quoted[1:-1].replace(quote * 2, quote)


def _match(pattern: re.Pattern[str], text: str) -> str:
    match = pattern.match(text)
    return match.group(0) if match else ""


def _remove_start(text: str, start: str) -> str:
    return _TRIM_START.sub("", text[len(start):])
