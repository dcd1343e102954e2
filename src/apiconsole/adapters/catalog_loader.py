"""Loading the operation catalog from a `package.module:attribute` reference.

The attribute may be an `OperationCatalog`, a client class, an iterable of
client classes, or a zero-argument callable returning one of those. The
built-in services are always part of the resulting catalog.
"""

from __future__ import annotations

import importlib
import operator
from collections.abc import Iterable
from typing import Any

from apiconsole.adapters.builtin_clients import AuthenticationClient, UtilityClient
from apiconsole.core.domain.catalog import OperationCatalog
from apiconsole.core.errors import CatalogError


def builtin_catalog() -> OperationCatalog:
    return OperationCatalog.from_clients(UtilityClient, AuthenticationClient)


def load_catalog(reference: str | None = None) -> OperationCatalog:
    catalog = builtin_catalog()
    if not reference:
        return catalog

    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name.strip() or not attribute.strip():
        raise CatalogError(f"Catalog reference '{reference}' must look like 'package.module:attribute'")

    try:
        module = importlib.import_module(module_name.strip())
    except ImportError as exc:
        raise CatalogError(f"Unable to import '{module_name}': {exc}") from exc

    try:
        target = operator.attrgetter(attribute.strip())(module)
    except AttributeError as exc:
        raise CatalogError(f"'{module_name}' has no attribute '{attribute}'") from exc

    return catalog.merge(to_catalog(target))


def to_catalog(target: Any) -> OperationCatalog:
    if isinstance(target, OperationCatalog):
        return target
    if isinstance(target, type):
        return OperationCatalog.from_clients(target)
    if callable(target):
        return to_catalog(target())
    if isinstance(target, Iterable) and not isinstance(target, (str, bytes)):
        items = list(target)
        if all(isinstance(item, type) for item in items):
            return OperationCatalog.from_clients(*items)
    raise CatalogError(f"Cannot build an operation catalog from {type(target).__name__}")
