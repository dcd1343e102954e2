"""Parameter binding: parsed arguments → typed call arguments.

Binding walks the declared `ParameterSpec`s in catalog order and consumes the
parsed parameters at most once each:

- a parsed parameter named like the declared one is taken first;
- otherwise the first remaining parameter is taken positionally, unless it is
  named (named parameters are never consumed out of order);
- a declared parameter left without a value gets its default when optional,
  else `None`.

Values are then coerced to the destination kind (exact numeric width, file
payloads fetched from a locator, structured data decoded from JSON).
"""

from __future__ import annotations

import logging
import struct
from collections.abc import Iterable, Mapping
from decimal import Decimal
from pathlib import PurePosixPath
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import unquote, urlsplit

import httpx
from pydantic import TypeAdapter, ValidationError

from apiconsole.core.domain.catalog import OperationDescriptor, ParameterSpec
from apiconsole.core.domain.models import Parameter, ParamKind
from apiconsole.core.domain.types import INTEGER_RANGES, TypeKind
from apiconsole.core.errors import BindingError
from apiconsole.core.interfaces.console import ResourceFetcher

LOGGER = logging.getLogger(__name__)


class ParameterBinder:
    """Binds parsed parameters to an operation's signature."""

    def __init__(self, variables: Mapping[str, str], fetcher: ResourceFetcher) -> None:
        self._variables = variables
        self._fetcher = fetcher

    async def bind(self, operation: OperationDescriptor, parameters: Iterable[Parameter]) -> list[Any]:
        remaining = list(parameters)

        single = operation.flattened
        if single is not None:
            arguments = [await self._build_object(single, remaining)]
        else:
            arguments = [await self._resolve(spec, remaining) for spec in operation.parameters]

        if remaining:
            LOGGER.debug("Ignoring %d unbound parameter(s) for '%s'", len(remaining), operation.verb)
        return arguments

    async def _build_object(self, spec: ParameterSpec, remaining: list[Parameter]) -> Any:
        values: dict[str, Any] = {}
        for field_spec in spec.fields:
            parameter = _take(field_spec, remaining)
            if parameter is None:
                # Omitted optional fields get a fresh default from the model.
                if not field_spec.is_optional:
                    values[field_spec.name] = None
                continue
            values[field_spec.name] = await self._coerce(field_spec, parameter, self._value_of(parameter))
        return spec.annotation.model_construct(**values)

    async def _resolve(self, spec: ParameterSpec, remaining: list[Parameter]) -> Any:
        parameter = _take(spec, remaining)
        if parameter is None:
            return _absent(spec)
        return await self._coerce(spec, parameter, self._value_of(parameter))

    def _value_of(self, parameter: Parameter) -> str:
        if parameter.kind is not ParamKind.VARIABLE_REFERENCE:
            return parameter.value
        try:
            return self._variables[parameter.value]
        except KeyError:
            raise BindingError(f"'${parameter.value}' is undefined") from None

    async def _coerce(self, spec: ParameterSpec, parameter: Parameter, value: str) -> Any:
        kind = spec.type_kind

        if kind is TypeKind.FILE:
            if parameter.kind is ParamKind.JSON_LITERAL:
                raise BindingError(f"Parameter '{spec.name}' does not accept a JSON argument")
            data = await _fetch(self._fetcher.fetch_bytes, value)
            return spec.annotation(data=data, file_name=file_name_of(value))

        if kind is TypeKind.STRING:
            return value

        if kind is TypeKind.BOOLEAN or kind.is_numeric:
            return coerce_scalar(value, kind)

        if parameter.kind is ParamKind.JSON_LITERAL:
            text = value
        else:
            text = await _fetch(self._fetcher.fetch_text, value)
        target = Optional[spec.annotation] if spec.nullable else spec.annotation
        try:
            return TypeAdapter(target).validate_json(text)
        except ValidationError as exc:
            raise BindingError(f"Invalid value for parameter '{spec.name}': {exc}") from exc


def coerce_scalar(value: str, kind: TypeKind) -> Any:
    """Convert text to a boolean or a number of the exact width of `kind`."""

    try:
        if kind is TypeKind.BOOLEAN:
            lowered = value.strip().lower()
            if lowered not in ("true", "false"):
                raise ValueError(f"'{value}' is not a valid boolean")
            return lowered == "true"
        if kind.is_integer:
            number = int(value)
            low, high = INTEGER_RANGES[kind]
            if not low <= number <= high:
                raise OverflowError(f"{number} is outside the {kind.value} range")
            return number
        if kind is TypeKind.FLOAT32:
            return struct.unpack("<f", struct.pack("<f", float(value)))[0]
        if kind is TypeKind.FLOAT64:
            return float(value)
        if kind is TypeKind.DECIMAL:
            return Decimal(value.strip())
    except (ValueError, ArithmeticError, struct.error) as exc:
        raise BindingError(f"Cannot convert '{value}' to {kind.value}: {exc}") from exc
    raise BindingError(f"'{kind.value}' is not a scalar type")


def file_name_of(locator: str) -> str:
    """Percent-decoded last path segment of a locator."""

    return unquote(PurePosixPath(urlsplit(locator).path).name)


def _take(spec: ParameterSpec, remaining: list[Parameter]) -> Parameter | None:
    """Remove and return the parsed parameter bound to `spec`, if any."""

    if not remaining:
        return None
    index = next((i for i, p in enumerate(remaining) if p.name == spec.name), -1)
    if index < 0:
        if remaining[0].is_named:
            return None
        index = 0
    return remaining.pop(index)


def _absent(spec: ParameterSpec) -> Any:
    return spec.default if spec.is_optional else None


async def _fetch(loader: Callable[[str], Awaitable[Any]], locator: str) -> Any:
    try:
        return await loader(locator)
    except (OSError, ValueError, httpx.HTTPError) as exc:
        raise BindingError(f"Unable to load '{locator}': {exc}") from exc
