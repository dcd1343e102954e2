"""Operation catalog consumed by the command processor.

The catalog is a static registry: every service is a `ServiceDescriptor`
holding a factory for its call target and the `OperationDescriptor`s it
exposes, each with ordered `ParameterSpec`s and the coroutine function that
performs the call. Signatures are inspected once, when the catalog is built,
never per call.

Naming conventions of the catalog:
- a service is the declared client name without its trailing `Client`;
- a verb is the declared operation name without its trailing `_async`.
"""

from __future__ import annotations

import inspect
import types
import typing
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any, Awaitable, Callable, Union

from pydantic import BaseModel

from apiconsole.core.domain.models import FilePayload
from apiconsole.core.domain.types import SCALAR_KINDS, TypeKind

SERVICE_SUFFIX = "Client"
VERB_SUFFIX = "_async"

_NO_DEFAULT = inspect.Parameter.empty


def service_name_of(declared_name: str) -> str:
    return declared_name.removesuffix(SERVICE_SUFFIX) or declared_name


def verb_of(declared_name: str) -> str:
    return declared_name.removesuffix(VERB_SUFFIX) or declared_name


@dataclass(frozen=True)
class ParameterSpec:
    """Declared parameter of an operation (or field of a flattenable object)."""

    name: str
    type_kind: TypeKind
    annotation: Any = str
    is_optional: bool = False
    default: Any = None
    nullable: bool = False
    fields: tuple["ParameterSpec", ...] = ()

    @classmethod
    def from_annotation(cls, name: str, annotation: Any, *, default: Any = _NO_DEFAULT) -> "ParameterSpec":
        """Describe a parameter from its Python annotation and optional default."""

        base, nullable = _unwrap_optional(annotation)
        base, kind = _kind_of(base)
        return cls(
            name=name,
            type_kind=kind,
            annotation=base,
            is_optional=default is not _NO_DEFAULT,
            default=None if default is _NO_DEFAULT else default,
            nullable=nullable,
            fields=_flattenable_fields(base) if kind is TypeKind.OBJECT else (),
        )

    @property
    def is_flattenable(self) -> bool:
        return self.type_kind is TypeKind.OBJECT and bool(self.fields)

    @property
    def alias(self) -> str:
        """Short type label used in help output."""

        if self.type_kind in (TypeKind.OBJECT, TypeKind.OTHER):
            label = getattr(self.annotation, "__name__", None) or str(self.annotation)
        elif self.type_kind is TypeKind.FILE:
            label = FilePayload.__name__
        else:
            label = self.type_kind.value
        return f"{label} | None" if self.nullable else label


@dataclass(frozen=True)
class OperationDescriptor:
    """A callable operation: `await func(target, *arguments)`."""

    name: str
    parameters: tuple[ParameterSpec, ...]
    func: Callable[..., Awaitable[Any]]

    @property
    def verb(self) -> str:
        return verb_of(self.name)

    @property
    def flattened(self) -> ParameterSpec | None:
        """The single flattenable object parameter, if the signature reduces to one."""

        if len(self.parameters) == 1 and self.parameters[0].is_flattenable:
            return self.parameters[0]
        return None

    @property
    def visible_parameters(self) -> tuple[ParameterSpec, ...]:
        """Parameters as the operator sees them (object fields when flattened)."""

        single = self.flattened
        return single.fields if single is not None else self.parameters


@dataclass(frozen=True)
class ServiceDescriptor:
    """A client type: `factory(http_client)` builds the call target."""

    name: str
    factory: Callable[[Any], Any]
    operations: tuple[OperationDescriptor, ...] = field(default_factory=tuple)

    @property
    def service_name(self) -> str:
        return service_name_of(self.name)

    @classmethod
    def from_client(cls, client_type: type) -> "ServiceDescriptor":
        """Describe every public coroutine method of `client_type` as an operation."""

        members: dict[str, Any] = {}
        for klass in reversed(client_type.__mro__[:-1]):
            for attr, value in vars(klass).items():
                if attr.startswith("_") or not inspect.iscoroutinefunction(value):
                    continue
                members[attr] = value

        operations: list[OperationDescriptor] = []
        for attr, func in members.items():
            specs = _describe_signature(func)
            if specs is None:
                continue
            operations.append(OperationDescriptor(name=attr, parameters=specs, func=func))
        return cls(name=client_type.__name__, factory=client_type, operations=tuple(operations))


class OperationCatalog(Mapping[str, ServiceDescriptor]):
    """Read-only mapping of declared client name to its service descriptor."""

    def __init__(self, services: Iterable[ServiceDescriptor] = ()) -> None:
        self._services: dict[str, ServiceDescriptor] = {}
        for service in services:
            self._services[service.name] = service

    @classmethod
    def from_clients(cls, *client_types: type) -> "OperationCatalog":
        return cls(ServiceDescriptor.from_client(t) for t in client_types)

    def merge(self, other: "OperationCatalog") -> "OperationCatalog":
        """New catalog with `other`'s services added (they win on name clashes)."""

        return OperationCatalog([*self.values(), *other.values()])

    def __getitem__(self, key: str) -> ServiceDescriptor:
        return self._services[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._services)

    def __len__(self) -> int:
        return len(self._services)


def _describe_signature(func: Callable[..., Any]) -> tuple[ParameterSpec, ...] | None:
    """Specs for the positional parameters after `self`.

    Returns None for signatures the console cannot call (required keyword-only
    arguments); optional keyword-only arguments are left to their defaults.
    """

    hints = typing.get_type_hints(func, include_extras=True)
    params = list(inspect.signature(func).parameters.values())[1:]
    specs: list[ParameterSpec] = []
    for param in params:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        if param.kind is inspect.Parameter.KEYWORD_ONLY:
            if param.default is _NO_DEFAULT:
                return None
            continue
        annotation = hints.get(param.name, str)
        specs.append(ParameterSpec.from_annotation(param.name, annotation, default=param.default))
    return tuple(specs)


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1 and len(args) != len(typing.get_args(annotation)):
            return args[0], True
    return annotation, False


def _kind_of(annotation: Any, metadata: Iterable[Any] = ()) -> tuple[Any, TypeKind]:
    for item in metadata:
        if isinstance(item, TypeKind):
            return annotation, item

    if typing.get_origin(annotation) is Annotated:
        base, *extras = typing.get_args(annotation)
        for item in extras:
            if isinstance(item, TypeKind):
                return base, item
        return _kind_of(base)

    if isinstance(annotation, type) and typing.get_origin(annotation) is None:
        if issubclass(annotation, FilePayload):
            return annotation, TypeKind.FILE
        if annotation in SCALAR_KINDS:
            return annotation, SCALAR_KINDS[annotation]
        if issubclass(annotation, BaseModel):
            return annotation, TypeKind.OBJECT
    return annotation, TypeKind.OTHER


def _flattenable_fields(model: Any) -> tuple[ParameterSpec, ...]:
    """Read/write fields of a pydantic model, in declaration order.

    Frozen models are not writable and therefore never flattened.
    """

    if not (isinstance(model, type) and issubclass(model, BaseModel)):
        return ()
    if model.model_config.get("frozen"):
        return ()

    fields: list[ParameterSpec] = []
    for name, info in model.model_fields.items():
        if info.frozen:
            return ()
        base, nullable = _unwrap_optional(info.annotation)
        base, kind = _kind_of(base, info.metadata)
        required = info.is_required()
        fields.append(
            ParameterSpec(
                name=name,
                type_kind=kind,
                annotation=base,
                is_optional=not required,
                default=None if required else info.get_default(call_default_factory=False),
                nullable=nullable,
            )
        )
    return tuple(fields)
