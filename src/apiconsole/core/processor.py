"""Command processor: resolve, bind, invoke and normalize.

`execute` takes one command line through the whole pipeline:

1. parse it (`CommandSyntaxError` propagates unchanged);
2. resolve service and verb against the catalog (`ResolutionError`);
3. bind and coerce the arguments (`BindingError`);
4. build the call target with the shared HTTP client and await the operation;
5. normalize the result, or a recognized API failure, into a `Response`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from apiconsole.core.binder import ParameterBinder
from apiconsole.core.domain.catalog import (
    OperationCatalog,
    OperationDescriptor,
    ServiceDescriptor,
)
from apiconsole.core.domain.models import ApiError, Response
from apiconsole.core.errors import CatalogError, ResolutionError
from apiconsole.core.interfaces.console import ResourceFetcher
from apiconsole.core.parser import CommandParser
from apiconsole.core.session import VariableStore

LOGGER = logging.getLogger(__name__)


class CommandProcessor:
    """Executes command lines against an `OperationCatalog`."""

    def __init__(
        self,
        parser: CommandParser,
        variables: VariableStore,
        catalog: OperationCatalog,
        client: httpx.AsyncClient,
        fetcher: ResourceFetcher,
    ) -> None:
        self._parser = parser
        self._catalog = catalog
        self._client = client
        self._binder = ParameterBinder(variables, fetcher)
        self._services: dict[str, ServiceDescriptor] = {}
        for service in catalog.values():
            existing = self._services.setdefault(service.service_name, service)
            if existing is not service:
                raise CatalogError(
                    f"Service name '{service.service_name}' is used by both '{existing.name}' and '{service.name}'"
                )

    async def execute(self, line: str) -> Response:
        command = self._parser.parse(line)

        service = self._services.get(command.service)
        if service is None:
            raise ResolutionError(f"Unknown service '{command.service}'")

        operation = _find_operation(service, command.verb)
        if operation is None:
            raise ResolutionError(f"Service '{command.service}' does not understand '{command.verb}'")

        arguments = await self._binder.bind(operation, command.parameters)
        LOGGER.debug("Invoking %s.%s with %d argument(s)", service.name, operation.name, len(arguments))

        target = service.factory(self._client)
        try:
            result = await operation.func(target, *arguments)
        except ApiError as exc:
            LOGGER.debug("API error %s from %s.%s", exc.status_code, service.name, operation.name)
            return exc.to_response()
        except httpx.HTTPStatusError as exc:
            return await _materialize(exc.response)

        return await _normalize(result)

    def get_help(self, service: str = "") -> str:
        return self.describe(service) if service.strip() else self.describe_all()

    def describe_all(self) -> str:
        lines = ["Services:"]
        lines.extend(f"  {name}" for name in self._services)
        lines.append("'help <service-name>' for more info")
        return "\n".join(lines) + "\n"

    def describe(self, service_name: str) -> str:
        service = self._services.get(service_name)
        if service is None:
            return f"Invalid service '{service_name}'"

        lines = [f"{service_name} service:"]
        for operation in service.operations:
            lines.append(f"  {operation.verb}{_signature(operation)}")
        return "\n".join(lines) + "\n"


def _find_operation(service: ServiceDescriptor, verb: str) -> OperationDescriptor | None:
    matches = [op for op in service.operations if op.verb == verb]
    if len(matches) > 1:
        raise ResolutionError(f"Service '{service.service_name}' has more than one '{verb}'")
    return matches[0] if matches else None


def _signature(operation: OperationDescriptor) -> str:
    parameters = operation.visible_parameters
    if not parameters:
        return ""
    return " <" + "> <".join(f"{p.name} ({p.alias})" for p in parameters) + ">"


async def _normalize(result: Any) -> Response:
    if isinstance(result, Response):
        return result
    if isinstance(result, httpx.Response):
        return await _materialize(result)
    raise TypeError(f"Expecting an operation to return a response but got '{type(result).__name__}'")


async def _materialize(response: httpx.Response) -> Response:
    """Copy status, headers and body, then release the transport response."""

    try:
        body = await response.aread()
    finally:
        await response.aclose()

    headers: dict[str, list[str]] = {}
    for name, value in response.headers.multi_items():
        headers.setdefault(name, []).append(value)
    return Response(status_code=response.status_code, headers=headers, body=body)
